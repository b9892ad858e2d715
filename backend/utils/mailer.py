# backend/utils/mailer.py
import html
import logging
from typing import List, Optional
from urllib.parse import urljoin

import httpx

from config import settings
from models.order import Order

logger = logging.getLogger(__name__)

MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def format_clp(amount: int) -> str:
    # es-CL grouping: 60.000
    return "$" + f"{amount:,}".replace(",", ".")


def _esc(value) -> str:
    return html.escape(str(value)) if value is not None else ""


def render_order_confirmation(order: Order, first_name: str) -> str:
    """HTML body of the order confirmation email."""
    created = order.created_at
    order_date = f"{created.day} de {MONTHS_ES[created.month - 1]} de {created.year}"
    order_url = urljoin(settings.FRONTEND_URL, f"/orden/{order.order_number}")

    rows = []
    for item in order.items:
        artist = f"<br><span style=\"color:#6b7280\">{_esc(item.artist)}</span>" if item.artist else ""
        image = (
            f"<img src=\"{_esc(item.image_url)}\" width=\"64\" height=\"64\" alt=\"{_esc(item.product_name)}\">"
            if item.image_url else ""
        )
        rows.append(
            "<tr>"
            f"<td>{image}</td>"
            f"<td><strong>{_esc(item.product_name)}</strong>{artist}<br>Cantidad: {item.quantity}</td>"
            f"<td style=\"text-align:right\">{format_clp(item.price * item.quantity)}</td>"
            "</tr>"
        )

    addr = order.address
    street = f"{_esc(addr.street)} {_esc(addr.number)}"
    if addr.apartment:
        street += f", {_esc(addr.apartment)}"
    zip_line = f"<p>Código postal: {_esc(addr.zip_code)}</p>" if addr.zip_code else ""
    shipping = "Gratis" if order.shipping == 0 else format_clp(order.shipping)

    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Orden confirmada #{_esc(order.order_number)}</title></head>
<body style="font-family: Arial, sans-serif; color: #111; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1>¡Gracias por tu compra, {_esc(first_name)}!</h1>
  <p>Tu pedido ha sido confirmado y está siendo procesado. Te notificaremos cuando tus vinilos vayan en camino.</p>
  <p><strong>Número de orden:</strong> {_esc(order.order_number)}<br>
     <strong>Fecha:</strong> {order_date}</p>
  <h2>Tu Pedido</h2>
  <table width="100%" cellpadding="6">{''.join(rows)}</table>
  <hr>
  <table width="100%" cellpadding="4">
    <tr><td>Subtotal</td><td style="text-align:right">{format_clp(order.subtotal)}</td></tr>
    <tr><td>Envío</td><td style="text-align:right">{shipping}</td></tr>
    <tr><td>IVA (19%)</td><td style="text-align:right">{format_clp(order.tax)}</td></tr>
    <tr><td><strong>Total</strong></td><td style="text-align:right"><strong>{format_clp(order.total)}</strong></td></tr>
  </table>
  <h2>Dirección de Envío</h2>
  <p>{street}</p>
  <p>{_esc(addr.comuna)}, {_esc(addr.city)}</p>
  <p>{_esc(addr.region)}</p>
  {zip_line}
  <p><a href="{_esc(order_url)}">Ver Estado del Pedido</a></p>
  <p style="color:#6b7280; font-size: 12px;">¿Tienes preguntas sobre tu pedido? Contáctanos en soporte@tiendavinilos.cl</p>
</body>
</html>"""


class ResendClient:
    def __init__(self, api_key: Optional[str] = None, api_url: Optional[str] = None,
                 sender: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL
        self.sender = sender or settings.EMAIL_FROM
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send(self, to: List[str], subject: str, html_body: str) -> dict:
        url = urljoin(self.api_url, "/emails")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = {"from": self.sender, "to": to, "subject": subject, "html": html_body}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                return response.json()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Resend send error: {e}")
                raise


mailer = ResendClient()


async def send_order_confirmation(order: Order, first_name: str) -> bool:
    """Best-effort confirmation email. Never raises; returns whether it was sent."""
    if not mailer.enabled:
        logger.info("Email disabled, skipping confirmation for %s", order.order_number)
        return False
    try:
        await mailer.send(
            to=[order.customer_email],
            subject=f"Orden confirmada #{order.order_number}",
            html_body=render_order_confirmation(order, first_name),
        )
    except Exception:
        logger.exception("Error sending confirmation email for %s", order.order_number)
        return False
    return True
