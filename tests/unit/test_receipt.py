"""Unit tests for the sale receipt builder."""
from datetime import UTC, datetime

from src.bk_notify.receipt import build_sale_receipt, payment_method_label
from src.bk_sales.domain.models import DeliveryAddress, LineItem, Sale


def _make_sale(**kwargs) -> Sale:
    return Sale(
        id="7312345678901234567",
        user_id="user-1",
        user_name=kwargs.get("user_name", "Ana"),
        user_email="ana@example.com",
        items=[LineItem("BK-1", "Rayuela", 2, 1000)],
        total_cents=kwargs.get("total_cents", 2500),
        payment_method=kwargs.get("payment_method", "credit_card"),
        delivery_method=kwargs.get("delivery_method", "home_delivery"),
        order_status="Entregado",
        shipping_cost_cents=kwargs.get("shipping_cost_cents", 500),
        delivery_address=kwargs.get(
            "delivery_address",
            DeliveryAddress("Calle 1", "Rosario", "2000", "AR", notes="Timbre 2"),
        ),
        created_at=datetime(2026, 3, 14, 18, 30, 5, tzinfo=UTC),
    )


class TestPaymentMethodLabel:
    def test_known_labels(self) -> None:
        assert payment_method_label("credit_card") == "Tarjeta de Crédito"
        assert payment_method_label("debit_card") == "Tarjeta de Débito"
        assert payment_method_label("cash") == "Efectivo"
        assert payment_method_label("transfer") == "Transferencia"

    def test_unknown_falls_back_to_raw(self) -> None:
        assert payment_method_label("voucher") == "voucher"


class TestBuildSaleReceipt:
    def test_subject_uses_short_reference(self) -> None:
        receipt = build_sale_receipt(_make_sale())
        assert receipt.reference == "01234567"
        assert receipt.subject == "Nueva Venta - ID: 01234567 - Cliente: Ana"

    def test_full_id_never_shown(self) -> None:
        receipt = build_sale_receipt(_make_sale())
        assert "7312345678901234567" not in receipt.text_body
        assert "7312345678901234567" not in receipt.html_body

    def test_text_body_lines(self) -> None:
        body = build_sale_receipt(_make_sale()).text_body
        assert "Fecha: 14/03/2026" in body
        assert "Hora: 18:30:05" in body
        assert "Rayuela x2 @ $10.00 = $20.00" in body
        assert "TOTAL: $25.00" in body
        assert "Método de Pago: Tarjeta de Crédito" in body
        assert "Notas: Timbre 2" in body
        assert "Costo de Envío: $5.00" in body
        assert "Estado del Pedido: Entregado" in body
        assert "Estado de la Venta: Completada" in body

    def test_pickup_shows_free_shipping(self) -> None:
        sale = _make_sale(delivery_method="local_pickup", delivery_address=None, shipping_cost_cents=0)
        body = build_sale_receipt(sale).text_body
        assert "Retiro en Local" in body
        assert "Costo de Envío: Gratis" in body

    def test_html_escapes_customer_name(self) -> None:
        receipt = build_sale_receipt(_make_sale(user_name="<b>Ana</b>"))
        assert "&lt;b&gt;Ana&lt;/b&gt;" in receipt.html_body
