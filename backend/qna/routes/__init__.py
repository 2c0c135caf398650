# Routes package init
"""
QnA Backend — API Routes Package
==================================

Route Inventory:
    - questions.py:  GET/POST /questions, GET/PUT/DELETE /questions/{id}
    - answers.py:    GET/POST /questions/{id}/answers
    - auth.py:       POST /register, POST /login
    - health.py:     GET /health

Routes stay thin: they read the request, call a service, and shape the
response. Authorization (session + ownership) is decided here; business
rules and persistence live in qna.services.
"""
