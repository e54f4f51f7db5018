"""App: coração do gateway: orquestração, serviços e observabilidade.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: fluxos end-to-end (webhook e comando → handler)
- services/: rate limit e classificação de erros
- infra/: implementações concretas (criptografia HMAC)
- protocols/: contratos/interfaces consumidos pelo gateway
- domain/: taxonomia de erros
- observability/: trace_id ambiente e métricas em memória

Padrão: app executa; api adapta; config configura.
"""
