"""
comdirect API endpoint definitions.

Paths are relative to the configured base URL (https://api.comdirect.de).

Documentation: https://www.comdirect.de/cms/kontakt-zugaenge-api.html
"""

# OAuth Endpoints
OAUTH_TOKEN = "/oauth/token"
OAUTH_REVOKE = "/oauth/revoke"

# Session & TAN Endpoints
SESSIONS = "/api/session/clients/user/v1/sessions"
SESSION = "/api/session/clients/user/v1/sessions/{session_uuid}"
SESSION_VALIDATE = "/api/session/clients/user/v1/sessions/{session_uuid}/validate"

# Order Endpoints
ORDERS = "/api/brokerage/v3/orders"
ORDERS_VALIDATION = "/api/brokerage/v3/orders/validation"
ORDERS_PREVALIDATION = "/api/brokerage/v3/orders/prevalidation"
ORDERS_COST_INDICATION = "/api/brokerage/v3/orders/costindicationexante"
ORDER = "/api/brokerage/v3/orders/{order_id}"
ORDER_VALIDATION = "/api/brokerage/v3/orders/{order_id}/validation"
ORDER_PREVALIDATION = "/api/brokerage/v3/orders/{order_id}/prevalidation"
ORDER_COST_INDICATION = "/api/brokerage/v3/orders/{order_id}/costindicationexante"
DEPOT_ORDERS = "/api/brokerage/depots/{depot_id}/v3/orders"

# Quote Endpoints
QUOTE_TICKETS = "/api/brokerage/v3/quoteticket"
QUOTE_TICKET = "/api/brokerage/v3/quoteticket/{ticket_id}"
QUOTES = "/api/brokerage/v3/quotes"
