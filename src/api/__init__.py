"""API: camada de borda HTTP.

Responsabilidades:
- Receber requests externos (webhooks)
- Vincular trace_id (X-Request-ID) a cada requisição
- Delegar verificação, rate limit e tratamento de erros ao gateway

Subpastas:
- middleware/: middlewares ASGI (trace_id)
- routes/: endpoints HTTP (webhook, health, métricas)

NÃO PODE conter: regras de verificação, rate limit ou classificação de erros.
"""
