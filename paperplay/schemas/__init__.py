from .ticket import Ticket, TicketCreate, TicketInDB, TicketUpdate, IssuedTicket, IssuedBatch, BatchIssueRequest
from .letter import Letter, LetterBase, LetterCreate, LetterInDB
from .content import BindContentRequest, ContentPayload
from .status import Countdown, GateResult, ViewerStatus, OperatorStatus, DeleteResult, ErrorResult
from .order import LetterRequest, LetterRequestBase, LetterRequestCreate, LetterRequestInDB, LetterRequestUpdate, \
    OrderStatusView, OrderResult
from .token import TokenPayload
