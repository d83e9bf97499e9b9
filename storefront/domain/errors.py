# storefront/domain/errors.py
"""
Bledy domenowe. Dziedzicza po wbudowanych wyjatkach, ktore routery juz
mapuja na kody HTTP (ValueError -> 400, PermissionError -> 401/403,
LookupError -> 404, RuntimeError -> 5xx).
"""


class NotFoundError(LookupError):
    pass


class UnknownProductError(ValueError):
    def __init__(self, product_id: str):
        super().__init__(f"Unknown product: {product_id}")
        self.product_id = product_id


class InvalidCheckoutError(ValueError):
    pass


class InvalidStatusTransitionError(ValueError):
    pass


class UnknownSettingError(ValueError):
    pass


class WebhookSignatureError(PermissionError):
    pass


class PaymentVerificationError(RuntimeError):
    """Settlement failed; callers only ever see a generic message."""


class PaymentNotCompletedError(PaymentVerificationError):
    pass


class CheckoutSessionError(RuntimeError):
    pass


class AuthServiceError(RuntimeError):
    pass
