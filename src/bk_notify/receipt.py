"""Sale receipt content for the delivery notification email.

The receipt shows the short sale reference (last 8 characters of the id),
never the full id.
"""
from dataclasses import dataclass
from html import escape

from src.bk_common.cents import cents_to_display
from src.bk_common.enums import SaleStatus
from src.bk_common.id_generator import short_id
from src.bk_sales.domain.models import Sale

PAYMENT_METHOD_LABELS = {
    "credit_card": "Tarjeta de Crédito",
    "debit_card": "Tarjeta de Débito",
    "cash": "Efectivo",
    "transfer": "Transferencia",
}


def payment_method_label(method: str) -> str:
    return PAYMENT_METHOD_LABELS.get(method, method)


@dataclass
class SaleReceipt:
    reference: str
    subject: str
    text_body: str
    html_body: str


def _delivery_lines(sale: Sale) -> list[str]:
    address = sale.delivery_address
    if sale.is_home_delivery and address is not None:
        lines = [
            "Envío a domicilio",
            f"Dirección: {address.street}",
            f"Ciudad: {address.city}",
            f"Código Postal: {address.postal_code}",
            f"País: {address.country}",
        ]
        if address.notes:
            lines.append(f"Notas: {address.notes}")
        lines.append(f"Costo de Envío: {cents_to_display(sale.shipping_cost_cents)}")
    else:
        lines = ["Retiro en Local", "Costo de Envío: Gratis"]
    lines.append(f"Estado del Pedido: {sale.order_status}")
    return lines


def build_sale_receipt(sale: Sale) -> SaleReceipt:
    reference = short_id(sale.id)
    created = sale.created_at
    status_label = "Completada" if sale.status == SaleStatus.COMPLETED else "Pendiente"

    header = [
        "Comprobante de Venta - Librería",
        "",
        f"ID de Venta: {reference}",
    ]
    if created is not None:
        header.append(f"Fecha: {created:%d/%m/%Y}")
        header.append(f"Hora: {created:%H:%M:%S}")
    customer = ["", f"Cliente: {sale.user_name}", f"Email: {sale.user_email}", ""]
    items = [
        f"{item.product_name} x{item.quantity} @ {cents_to_display(item.price_cents)}"
        f" = {cents_to_display(item.subtotal_cents)}"
        for item in sale.items
    ]
    footer = [
        f"TOTAL: {cents_to_display(sale.total_cents)}",
        "",
        f"Método de Pago: {payment_method_label(sale.payment_method)}",
        "",
        *_delivery_lines(sale),
        "",
        f"Estado de la Venta: {status_label}",
    ]
    text_body = "\n".join(header + customer + items + footer)

    rows = "".join(
        f"<tr><td>{escape(item.product_name)}</td><td>{item.quantity}</td>"
        f"<td>{cents_to_display(item.price_cents)}</td>"
        f"<td>{cents_to_display(item.subtotal_cents)}</td></tr>"
        for item in sale.items
    )
    html_body = (
        "<html><body>"
        f"<h1>Comprobante de Venta - Librería</h1>"
        f"<p><strong>ID de Venta:</strong> {reference}</p>"
        f"<p><strong>Cliente:</strong> {escape(sale.user_name)} ({escape(sale.user_email)})</p>"
        "<table><tr><th>Producto</th><th>Cantidad</th><th>Precio Unitario</th><th>Subtotal</th></tr>"
        f"{rows}"
        f"<tr><td colspan=\"3\">TOTAL:</td><td>{cents_to_display(sale.total_cents)}</td></tr>"
        "</table>"
        f"<p>{'<br>'.join(escape(line) for line in footer[2:])}</p>"
        "</body></html>"
    )

    return SaleReceipt(
        reference=reference,
        subject=f"Nueva Venta - ID: {reference} - Cliente: {sale.user_name}",
        text_body=text_body,
        html_body=html_body,
    )
