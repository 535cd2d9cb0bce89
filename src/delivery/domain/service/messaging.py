"""Text composition for the WhatsApp hand-offs.

Only the text and link are built here. Opening the link, and whatever
sending follows, is up to the caller.
"""

from __future__ import annotations

import re
from urllib.parse import quote

from delivery.domain.model.order import Order, OrderStatus
from delivery.domain.model.tenant import MessageTemplates


def customer_status_message(order: Order, templates: MessageTemplates) -> str | None:
    """Message telling the customer their order moved to its new status.

    Returns None for statuses customers are not notified about.
    """
    if order.status is OrderStatus.PREPARING:
        template = templates.received
    elif order.status is OrderStatus.OUT_FOR_DELIVERY:
        template = templates.out_for_delivery
    elif order.status is OrderStatus.READY_FOR_PICKUP:
        template = templates.ready_for_pickup
    else:
        return None
    return (
        template
        .replace("{customer}", order.customer.name or "Customer")
        .replace("{order_id}", order.short_code)
    )


def vendor_order_message(order: Order) -> str:
    """Plain-text order summary a customer sends to the store after checkout."""
    lines = [f"New order #{order.short_code}", ""]
    for item in order.items:
        lines.append(f"{item.quantity}x {item.product_name} - {item.line_total}")
        for variant in item.selected_variants:
            lines.append(f"   + {variant.group_name}: {variant.item_name}")
        if item.notes:
            lines.append(f"   Note: {item.notes}")
    lines.append("")
    lines.append(f"Subtotal: {order.subtotal}")
    if not order.delivery_fee.is_zero:
        lines.append(f"Delivery fee: {order.delivery_fee}")
    lines.append(f"Total: {order.total_amount}")
    lines.append("")
    lines.append(f"Customer: {order.customer.name}")
    lines.append(f"Phone: {order.customer.phone}")
    lines.append(f"{order.delivery_type.value}: {order.delivery_address}")
    lines.append(f"Payment: {order.payment_method}")
    return "\n".join(lines)


def whatsapp_link(phone: str, text: str, country_code: str = "55") -> str | None:
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return None
    return f"https://wa.me/{country_code}{digits}?text={quote(text)}"
