# backend/storefront/checkout.py
"""Four-step checkout: contact, shipping, payment, review.

Moving forward requires the current step's form to validate; moving back
never does and keeps everything already entered. The draft only leaves the
process in ``place_order``, as one request to the order service.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from schemas.cart import CartItem
from schemas.checkout import ContactForm, ShippingForm, PaymentForm
from storefront.cart_store import CartStore
from storefront.order_client import OrderApiError, OrderClient, OrderConfirmation
from utils.errors import field_errors
from utils.pricing import compute_totals

logger = logging.getLogger(__name__)

CART_PATH = "/carrito"


class CheckoutStep(enum.IntEnum):
    CONTACT = 1
    SHIPPING = 2
    PAYMENT = 3
    REVIEW = 4


FORMS: Dict[CheckoutStep, Type[BaseModel]] = {
    CheckoutStep.CONTACT: ContactForm,
    CheckoutStep.SHIPPING: ShippingForm,
    CheckoutStep.PAYMENT: PaymentForm,
}


class CheckoutError(Exception):
    pass


class StepValidationError(CheckoutError):
    def __init__(self, step: CheckoutStep, errors: List[dict]):
        super().__init__(f"Invalid {step.name.lower()} data")
        self.step = step
        self.errors = errors


class WrongStepError(CheckoutError):
    pass


class EmptyCartError(CheckoutError):
    pass


@dataclass(frozen=True)
class ReviewSummary:
    contact: ContactForm
    shipping: ShippingForm
    payment: PaymentForm
    items: Tuple[CartItem, ...]
    subtotal: int
    shipping_cost: int
    total: int


class CheckoutWorkflow:
    def __init__(self, cart: CartStore, order_client: OrderClient):
        self._cart = cart
        self._client = order_client
        self.step = CheckoutStep.CONTACT
        self._data: Dict[CheckoutStep, BaseModel] = {}
        self.error: Optional[str] = None
        self.is_processing = False
        self.redirect_to: Optional[str] = None
        self.confirmation: Optional[OrderConfirmation] = None

    # ---- form state ----

    @property
    def contact(self) -> Optional[ContactForm]:
        return self._data.get(CheckoutStep.CONTACT)

    @property
    def shipping(self) -> Optional[ShippingForm]:
        return self._data.get(CheckoutStep.SHIPPING)

    @property
    def payment(self) -> Optional[PaymentForm]:
        return self._data.get(CheckoutStep.PAYMENT)

    def form_defaults(self, step: CheckoutStep) -> dict:
        """Values to pre-fill ``step``'s form with when (re)entering it."""
        data = self._data.get(step)
        return data.model_dump() if data is not None else {}

    # ---- navigation ----

    def _submit(self, step: CheckoutStep, data: dict) -> None:
        if self.step != step:
            raise WrongStepError(f"Checkout is on {self.step.name}, not {step.name}")
        try:
            self._data[step] = FORMS[step].model_validate(data)
        except ValidationError as e:
            raise StepValidationError(step, field_errors(e.errors())) from e
        self.step = CheckoutStep(step + 1)

    def submit_contact(self, data: dict) -> None:
        self._submit(CheckoutStep.CONTACT, data)

    def submit_shipping(self, data: dict) -> None:
        self._submit(CheckoutStep.SHIPPING, data)

    def submit_payment(self, data: dict) -> None:
        self._submit(CheckoutStep.PAYMENT, data)

    def back(self) -> None:
        if self.step > CheckoutStep.CONTACT:
            self.step = CheckoutStep(self.step - 1)

    def edit(self, step: CheckoutStep) -> None:
        """Jump back to an earlier step from the review links."""
        if step >= self.step:
            raise WrongStepError(f"Cannot edit {step.name} from {self.step.name}")
        self.step = step

    # ---- review & confirmation ----

    def _require_cart(self) -> None:
        if self._cart.is_empty:
            self.redirect_to = CART_PATH
            raise EmptyCartError("El carrito está vacío")

    def review(self) -> ReviewSummary:
        if self.step != CheckoutStep.REVIEW:
            raise WrongStepError("Review is only available on the last step")
        self._require_cart()
        items = tuple(self._cart.items)
        totals = compute_totals((i.price, i.quantity) for i in items)
        return ReviewSummary(
            contact=self.contact,
            shipping=self.shipping,
            payment=self.payment,
            items=items,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping,
            total=totals.total,
        )

    def build_draft(self) -> dict:
        summary = self.review()
        return {
            "customer": summary.contact.model_dump(mode="json", by_alias=True),
            "shipping": summary.shipping.model_dump(mode="json", by_alias=True, exclude_none=True),
            "payment": summary.payment.model_dump(mode="json", by_alias=True),
            "items": [i.model_dump(mode="json", by_alias=True, exclude_none=True) for i in summary.items],
            "total": summary.total,
        }

    def place_order(self) -> OrderConfirmation:
        """Submit the draft. On failure the cart and all form data stay put."""
        draft = self.build_draft()

        self.error = None
        self.is_processing = True
        try:
            confirmation = self._client.create_order(draft)
        except OrderApiError as e:
            self.error = e.message
            logger.warning("Order submission failed: %s", e.message)
            raise
        finally:
            self.is_processing = False

        self._cart.clear_cart()
        self.confirmation = confirmation
        self.redirect_to = f"/orden/{confirmation.order_id}"
        return confirmation
