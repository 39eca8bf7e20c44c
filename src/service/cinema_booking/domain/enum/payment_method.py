from enum import StrEnum


class PaymentMethod(StrEnum):
    GCASH = 'gcash'
    PAYMAYA = 'paymaya'
    CREDIT_CARD = 'credit_card'
