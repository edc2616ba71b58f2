"""App — sessão de usuário, canvas e infraestrutura de composição.

Subpastas:
- bootstrap/: composition root (factories, PageContext, inicialização)
- canvas/: pipeline de bootstrap do canvas, container e registros
- sessions/: sessão de usuário, dispatcher de atributos e invalidação
- events/: barramento de eventos local
- protocols/: contratos/interfaces dos colaboradores
- observability/: correlation_id para logs estruturados
- constants/: tópicos, códigos de erro e mensagens

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
