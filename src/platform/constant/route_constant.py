# API Route Constants

# Base API
API_BASE = '/api'

# User routes
USER_BASE = f'{API_BASE}/user'
USER_CREATE = USER_BASE
USER_LOGIN = f'{USER_BASE}/login'
USER_ME = USER_BASE

# Event routes
EVENT_BASE = f'{API_BASE}/events'
EVENT_CREATE = EVENT_BASE
EVENT_LIST = EVENT_BASE
EVENT_MY_EVENTS = f'{EVENT_BASE}/my-events'
EVENT_GET = f'{EVENT_BASE}/{{event_id}}'
EVENT_UPDATE = f'{EVENT_BASE}/{{event_id}}'
EVENT_DELETE = f'{EVENT_BASE}/{{event_id}}'
EVENT_PURCHASE = f'{EVENT_BASE}/{{event_id}}/purchase'

# Ticket routes
TICKET_BASE = f'{API_BASE}/tickets'
TICKET_MY_TICKETS = f'{TICKET_BASE}/my-tickets'
