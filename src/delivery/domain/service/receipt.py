"""Receipt generator: order snapshot -> printable HTML document.

Pure: the only time shown is the order's stored creation time, so the same
order always renders to the same bytes. The document prints itself when
opened and closes its window once printing is done.
"""

from __future__ import annotations

from jinja2 import Environment, StrictUndefined

from delivery.domain.model.order import DeliveryType, Order, OrderLineItem
from delivery.domain.model.tenant import TenantDisplayInfo

DEFAULT_TENANT_NAME = "Your Restaurant"
ANONYMOUS_CUSTOMER = "Anonymous customer"

_TEMPLATE = """\
<html>
  <head>
    <meta charset="utf-8">
    <title>Order {{ order.short_code }}</title>
    <style>
      body { font-family: 'Courier New', monospace; font-size: 10pt; margin: 20px; color: #000; }
      h2, p { margin: 0; text-align: center; }
      h2 { font-size: 1.2em; }
      hr { border: none; border-top: 1px dashed black; margin: 10px 0; }
      table { width: 100%; border-collapse: collapse; }
      th, td { padding: 2px 0; }
      th { text-align: left; border-bottom: 1px dashed black; }
      .totals { text-align: right; margin-top: 10px; }
      .totals strong { font-size: 1.1em; }
      .section { margin-top: 15px; }
      .section p { text-align: left; }
      .section-title { font-weight: bold; }
      .options, .notes { color: #555; padding-left: 10px; }
    </style>
  </head>
  <body>
    <h2>{{ tenant_name }}</h2>
    <p>Order: {{ order.short_code }}</p>
    <p>{{ order.created_at.strftime("%d/%m/%Y %H:%M:%S") }}</p>
    <hr />
    <div class="section">
      <p class="section-title">Customer:</p>
      <p>{{ customer_name }}</p>
{% if order.customer.phone %}
      <p>Phone: {{ order.customer.phone }}</p>
{% endif %}
{% if is_delivery %}
      <p>{{ order.delivery_address }}</p>
{% endif %}
    </div>
    <hr />
    <table>
      <thead>
        <tr>
          <th>Item</th>
          <th style="text-align: center;">Qty x Price</th>
          <th style="text-align: right;">Total</th>
        </tr>
      </thead>
      <tbody>
{% for line in lines %}
        <tr>
          <td colspan="3" style="padding-top: 5px;">
            {{ line.name }}
{% for group, names in line.options %}
            <br><small class="options">{{ group }}: {{ names | join(", ") }}</small>
{% endfor %}
{% if line.notes %}
            <br><small class="notes">NOTE: {{ line.notes }}</small>
{% endif %}
          </td>
        </tr>
        <tr>
          <td style="padding-bottom: 5px;">&nbsp;</td>
          <td style="text-align: center; padding-bottom: 5px;">{{ line.quantity }} x {{ line.unit_price }}</td>
          <td style="text-align: right; padding-bottom: 5px;">{{ line.total }}</td>
        </tr>
{% endfor %}
      </tbody>
    </table>
    <hr />
    <div class="totals">
      <p>Subtotal: {{ order.subtotal }}</p>
{% if not order.delivery_fee.is_zero %}
      <p>Delivery fee: {{ order.delivery_fee }}</p>
{% endif %}
      <strong>Total: {{ order.total_amount }}</strong>
    </div>
    <hr />
    <p style="text-align: left;">Payment method: {{ order.payment_method }}</p>
    <p style="text-align: left;">Delivery type: {{ order.delivery_type.value }}</p>
    <script>
      window.print();
      window.onafterprint = () => window.close();
    </script>
  </body>
</html>
"""

_env = Environment(autoescape=True, trim_blocks=True, undefined=StrictUndefined)
_template = _env.from_string(_TEMPLATE)


def group_variants(item: OrderLineItem) -> list[tuple[str, list[str]]]:
    """Selected options grouped by group name, in first-seen order."""
    groups: dict[str, list[str]] = {}
    for variant in item.selected_variants:
        groups.setdefault(variant.group_name, []).append(variant.item_name)
    return list(groups.items())


def _line_view(item: OrderLineItem) -> dict:
    return {
        "name": item.product_name or item.product_id,
        "options": group_variants(item),
        "notes": item.notes,
        "quantity": item.quantity.value,
        "unit_price": str(item.effective_price),
        "total": str(item.line_total),
    }


def generate_receipt(order: Order, tenant: TenantDisplayInfo) -> str:
    return _template.render(
        order=order,
        tenant_name=tenant.name or DEFAULT_TENANT_NAME,
        customer_name=order.customer.name or ANONYMOUS_CUSTOMER,
        is_delivery=order.delivery_type is DeliveryType.DELIVERY,
        lines=[_line_view(item) for item in order.items],
    )
