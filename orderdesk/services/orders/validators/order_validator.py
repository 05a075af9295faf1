"""
OrderValidator service for validating draft orders before submission.

This service follows SRP (Single Responsibility Principle) by focusing only on
validation logic for draft orders.
"""

import logging

from orderdesk.domain.models import OrderDraft
from orderdesk.domain.value_objects import DiscountMode
from orderdesk.utils.error_handler import OrderValidationException

logger = logging.getLogger(__name__)


class OrderValidator:
    """
    Validates a draft order before it is flattened and submitted.

    Responsibilities:
    - Validate required fields (customer, delivery date)
    - Validate branches (at least one, distinct addresses, none empty)
    - Validate line items (quantity, price and discount ranges)

    Every failing field is collected so the form can show all errors at
    once, keyed by field: ``customer``, ``delivery_date``, ``branches``,
    ``branch_<index>`` and ``branch_<index>_item_<index>``.
    """

    def validate(self, draft: OrderDraft) -> OrderDraft:
        """
        Validate a draft order.

        Args:
            draft: Draft order

        Returns:
            OrderDraft: The same draft if valid

        Raises:
            OrderValidationException: With every failing field
        """
        errors = self.collect_errors(draft)
        if errors:
            logger.info(f"Draft validation failed for customer {draft.customer_id}: {sorted(errors)}")
            raise OrderValidationException(field_errors=errors)

        logger.debug(f"Draft validation passed for customer {draft.customer_id}")
        return draft

    def collect_errors(self, draft: OrderDraft) -> dict[str, str]:
        """
        Collect validation errors without raising.

        Returns:
            dict: Field key to message; empty when the draft is valid
        """
        errors: dict[str, str] = {}
        self._validate_required_fields(draft, errors)
        self._validate_branches(draft, errors)
        self._validate_line_items(draft, errors)
        self._validate_order_discount(draft, errors)
        return errors

    def _validate_required_fields(self, draft: OrderDraft, errors: dict[str, str]) -> None:
        if draft.customer is None:
            errors["customer"] = "Please select a customer"
        if draft.delivery_date is None:
            errors["delivery_date"] = "Please select a delivery date"

    def _validate_branches(self, draft: OrderDraft, errors: dict[str, str]) -> None:
        if not draft.branches:
            errors["branches"] = "Please add at least one branch"
            return

        seen: set[str] = set()
        for index, branch in enumerate(draft.branches):
            if branch.shipping_address_id in seen:
                errors[f"branch_{index}"] = f"Address already used by another branch: {branch.address_name}"
            seen.add(branch.shipping_address_id)

            if branch.is_empty:
                errors.setdefault(f"branch_{index}", f"Please add products for branch: {branch.address_name}")

        # The summary points at the first failing branch
        first = next((key for key in errors if key.startswith("branch_")), None)
        if first:
            errors.setdefault("branches", errors[first])

    def _validate_line_items(self, draft: OrderDraft, errors: dict[str, str]) -> None:
        for branch_index, branch in enumerate(draft.branches):
            seen: set[str] = set()
            for item_index, item in enumerate(branch.items):
                key = f"branch_{branch_index}_item_{item_index}"
                if item.variation_id in seen:
                    errors[key] = f"{item.product_name or item.variation_id} is listed twice in this branch"
                elif item.quantity < 1:
                    errors[key] = "Quantity must be at least 1"
                elif item.unit_price < 0:
                    errors[key] = "Unit price cannot be negative"
                elif item.discount_value < 0 or (
                    item.discount_mode is DiscountMode.PERCENT and item.discount_value > 100
                ):
                    errors[key] = "Discount is out of range"
                seen.add(item.variation_id)

    def _validate_order_discount(self, draft: OrderDraft, errors: dict[str, str]) -> None:
        discount = draft.order_discount
        if discount.value < 0 or (discount.mode is DiscountMode.PERCENT and discount.value > 100):
            errors["order_discount"] = "Order discount is out of range"
