"""Unit tests for the storefront checkout workflow."""

from unittest.mock import MagicMock

import pytest

from storefront.cart_store import CartStore, MemoryCartStorage
from storefront.checkout import (
    CART_PATH,
    CheckoutStep,
    CheckoutWorkflow,
    EmptyCartError,
    StepValidationError,
    WrongStepError,
)
from storefront.order_client import OrderApiError, OrderConfirmation

CONTACT = {
    "email": "ana@tiendavinilos.cl",
    "firstName": "Ana",
    "lastName": "Pérez",
    "phone": "+56912345678",
}
SHIPPING = {
    "street": "Av. Providencia",
    "number": "1234",
    "region": "Región Metropolitana",
    "city": "Santiago",
    "comuna": "Providencia",
}
PAYMENT = {"method": "webpay"}


@pytest.fixture
def cart() -> CartStore:
    store = CartStore(MemoryCartStorage(), listener=MagicMock())
    store.add_item({"id": "1", "name": "Abbey Road", "price": 30000, "artist": "The Beatles"})
    store.add_item({"id": "1", "name": "Abbey Road", "price": 30000, "artist": "The Beatles"})
    return store


@pytest.fixture
def order_client() -> MagicMock:
    client = MagicMock()
    client.create_order.return_value = OrderConfirmation(
        order_id="ORD-20260112-00001", order_number="ORD-20260112-00001"
    )
    return client


@pytest.fixture
def workflow(cart: CartStore, order_client: MagicMock) -> CheckoutWorkflow:
    return CheckoutWorkflow(cart, order_client)


def _complete_forms(workflow: CheckoutWorkflow) -> None:
    workflow.submit_contact(CONTACT)
    workflow.submit_shipping(SHIPPING)
    workflow.submit_payment(PAYMENT)


class TestStepNavigation:
    """Tests for moving between checkout steps."""

    def test_starts_on_contact(self, workflow: CheckoutWorkflow) -> None:
        assert workflow.step == CheckoutStep.CONTACT

    def test_valid_forms_reach_review(self, workflow: CheckoutWorkflow) -> None:
        _complete_forms(workflow)

        assert workflow.step == CheckoutStep.REVIEW

    def test_invalid_email_blocks_advance(
        self, workflow: CheckoutWorkflow, order_client: MagicMock
    ) -> None:
        """Test that an invalid email never leaves the contact step."""
        with pytest.raises(StepValidationError) as exc_info:
            workflow.submit_contact({**CONTACT, "email": "no-es-un-correo"})

        assert workflow.step == CheckoutStep.CONTACT
        assert [e["field"] for e in exc_info.value.errors] == ["email"]
        with pytest.raises(WrongStepError):
            workflow.place_order()
        order_client.create_order.assert_not_called()

    def test_short_street_blocks_shipping(self, workflow: CheckoutWorkflow) -> None:
        workflow.submit_contact(CONTACT)

        with pytest.raises(StepValidationError):
            workflow.submit_shipping({**SHIPPING, "street": "Av"})
        assert workflow.step == CheckoutStep.SHIPPING

    def test_unknown_payment_method_rejected(self, workflow: CheckoutWorkflow) -> None:
        workflow.submit_contact(CONTACT)
        workflow.submit_shipping(SHIPPING)

        with pytest.raises(StepValidationError):
            workflow.submit_payment({"method": "bitcoin"})

    def test_submit_out_of_order(self, workflow: CheckoutWorkflow) -> None:
        with pytest.raises(WrongStepError):
            workflow.submit_shipping(SHIPPING)

    def test_back_keeps_entered_data(self, workflow: CheckoutWorkflow) -> None:
        """Test that going back pre-fills the earlier form."""
        workflow.submit_contact(CONTACT)
        workflow.submit_shipping(SHIPPING)

        workflow.back()
        workflow.back()

        assert workflow.step == CheckoutStep.CONTACT
        assert workflow.form_defaults(CheckoutStep.CONTACT)["email"] == "ana@tiendavinilos.cl"
        assert workflow.shipping.comuna == "Providencia"

    def test_back_on_first_step_stays(self, workflow: CheckoutWorkflow) -> None:
        workflow.back()

        assert workflow.step == CheckoutStep.CONTACT

    def test_edit_from_review(self, workflow: CheckoutWorkflow) -> None:
        _complete_forms(workflow)

        workflow.edit(CheckoutStep.SHIPPING)

        assert workflow.step == CheckoutStep.SHIPPING
        assert workflow.payment is not None

    def test_edit_forward_rejected(self, workflow: CheckoutWorkflow) -> None:
        with pytest.raises(WrongStepError):
            workflow.edit(CheckoutStep.REVIEW)


class TestReview:
    """Tests for the review step and the draft it produces."""

    def test_summary_totals(self, workflow: CheckoutWorkflow) -> None:
        _complete_forms(workflow)

        summary = workflow.review()

        assert summary.subtotal == 60000
        assert summary.shipping_cost == 0
        assert summary.total == 60000
        assert len(summary.items) == 1

    def test_empty_cart_redirects(self, cart: CartStore, workflow: CheckoutWorkflow) -> None:
        """Test that review with an empty cart points back to the cart page."""
        _complete_forms(workflow)
        cart.clear_cart()

        with pytest.raises(EmptyCartError):
            workflow.review()
        assert workflow.redirect_to == CART_PATH

    def test_draft_is_camel_case(self, workflow: CheckoutWorkflow) -> None:
        _complete_forms(workflow)

        draft = workflow.build_draft()

        assert draft["customer"]["firstName"] == "Ana"
        assert draft["payment"] == {"method": "webpay"}
        assert draft["items"][0]["quantity"] == 2
        assert draft["total"] == 60000
        assert "apartment" not in draft["shipping"]


class TestPlaceOrder:
    """Tests for submitting the order."""

    def test_success_clears_cart(
        self, cart: CartStore, workflow: CheckoutWorkflow, order_client: MagicMock
    ) -> None:
        _complete_forms(workflow)

        confirmation = workflow.place_order()

        assert confirmation.order_number == "ORD-20260112-00001"
        assert cart.is_empty
        assert workflow.redirect_to == "/orden/ORD-20260112-00001"
        assert workflow.is_processing is False
        order_client.create_order.assert_called_once()

    def test_failure_keeps_cart_and_data(
        self, cart: CartStore, workflow: CheckoutWorkflow, order_client: MagicMock
    ) -> None:
        """Test that a rejected order leaves everything in place for a retry."""
        order_client.create_order.side_effect = OrderApiError("Error al procesar la orden", status_code=500)
        _complete_forms(workflow)

        with pytest.raises(OrderApiError):
            workflow.place_order()

        assert workflow.error == "Error al procesar la orden"
        assert workflow.is_processing is False
        assert cart.get_total_items() == 2
        assert workflow.step == CheckoutStep.REVIEW
        assert workflow.contact.email == "ana@tiendavinilos.cl"
        assert workflow.redirect_to is None

    def test_retry_after_failure(self, workflow: CheckoutWorkflow, order_client: MagicMock) -> None:
        confirmation = order_client.create_order.return_value
        order_client.create_order.side_effect = [OrderApiError("Error al procesar la orden"), confirmation]
        _complete_forms(workflow)

        with pytest.raises(OrderApiError):
            workflow.place_order()
        workflow.place_order()

        assert workflow.error is None
        assert order_client.create_order.call_count == 2
