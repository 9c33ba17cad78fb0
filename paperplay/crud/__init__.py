from .crud_ticket import ticket
from .crud_order import letter_request
