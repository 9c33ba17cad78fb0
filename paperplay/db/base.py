# Import all the models, so that Base has them before being
# imported by Alembic or create_all

from paperplay.db.base_class import Base  # noqa
from paperplay.models.ticket import Ticket  # noqa
from paperplay.models.letter import Letter  # noqa
from paperplay.models.order import LetterRequest  # noqa
