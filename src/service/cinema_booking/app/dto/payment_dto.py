import attrs


@attrs.frozen
class GatewaySuccess:
    transaction_ref: str


@attrs.frozen
class GatewayFailure:
    reason: str
