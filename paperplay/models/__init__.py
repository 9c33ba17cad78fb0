from .ticket import Ticket
from .letter import Letter
from .order import LetterRequest
