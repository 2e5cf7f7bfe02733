"""Event catalog for outgoing and incoming merchant webhooks."""

import copy

AVAILABLE_EVENTS = [
    ("checkout.iniciado", "Checkout Iniciado"),
    ("checkout.abandonado", "Checkout Abandonado"),
    ("pagamento.aprovado", "Pagamento Aprovado"),
    ("pagamento.recusado", "Pagamento Recusado"),
    ("pagamento.pendente", "Pagamento Pendente"),
    ("boleto.gerado", "Boleto Gerado"),
    ("pix.gerado", "Pix Gerado"),
    ("assinatura.criada", "Assinatura Criada"),
    ("assinatura.cancelada", "Assinatura Cancelada"),
    ("reembolso.solicitado", "Reembolso Solicitado"),
    ("reembolso.aprovado", "Reembolso Aprovado"),
]

EVENT_IDS = frozenset(event_id for event_id, _ in AVAILABLE_EVENTS)

DEFAULT_TEST_EVENT = "pagamento.aprovado"

INCOMING_ORDER_UPDATE = "pedido.atualizar"
INCOMING_ACCESS_GRANT = "acesso.liberar"

SAMPLE_PAYLOADS = {
    "pagamento.aprovado": {
        "event": "pagamento.aprovado",
        "checkout_id": "chk_123456",
        "order_id": "ord_987654",
        "amount": 197.00,
        "currency": "BRL",
        "payment_method": "credit_card",
        "status": "paid",
        "customer": {
            "name": "João da Silva",
            "email": "joao@exemplo.com",
            "phone": "5511999998888",
            "cpf": "123.456.789-00",
        },
        "items": [
            {"name": "Curso React Pro", "price": 197.00, "qty": 1},
        ],
        "created_at": "2023-10-27T14:30:00Z",
    },
    "checkout.abandonado": {
        "event": "checkout.abandonado",
        "checkout_id": "chk_123456",
        "cart_token": "crt_abc123",
        "recovered_url": "https://checkout.app/r/abc123",
        "customer": {
            "email": "joao@exemplo.com",
            "name": "João",
        },
        "created_at": "2023-10-27T15:00:00Z",
    },
}


def sample_payload(event: str) -> dict:
    """Example body for ``event``; unknown events get the approved payment example."""
    return copy.deepcopy(SAMPLE_PAYLOADS.get(event) or SAMPLE_PAYLOADS[DEFAULT_TEST_EVENT])
