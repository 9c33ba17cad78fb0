from enum import Enum

# Life cycle of a ticket:
#
#   (created) UNBOUND -> BOUND (content_kind set)
#       BOUND and unlock_at in the future   -> viewer sees LOCKED with a countdown
#       BOUND and no unlock_at or it passed -> viewer sees READY
#   BOUND -> UNBOUND only through an explicit clear
#   any state -> (gone) only through an operator delete
#
# Order workflow (independent of the ticket state):
#
#   Pending -> Processing -> Done


class ContentKind(str, Enum):
    VIDEO = "video"
    LETTER = "letter"


class ViewerState(str, Enum):
    NOT_FOUND = "NOT_FOUND"     # no such ticket
    EMPTY = "EMPTY"             # ticket exists, nothing bound yet
    LOCKED = "LOCKED"           # content bound, unlock time not reached
    READY = "READY"             # content bound and visible


class Availability(str, Enum):
    AVAILABLE = "AVAILABLE"     # unbound, can still be recorded on
    USED = "USED"               # bound


class DeletePredicate(str, Enum):
    BOUND = "bound"
    UNBOUND = "unbound"
    ALL = "all"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    DONE = "Done"


class LetterTheme(str, Enum):
    CLASSIC = "classic"
    LOVE = "love"
    CHRISTMAS = "christmas"
    NEWYEAR = "newyear"
    VALENTINES = "valentines"
    THANKSGIVING = "thanksgiving"
    EASTER = "easter"
    HALLOWEEN = "halloween"
    CNY = "cny"
    SIMPLE = "simple"
