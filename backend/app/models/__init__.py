from app.models.enums import TradeDirection, TradeStatus
from app.models.journal import JournalEntry
from app.models.note import Note
from app.models.playbook import Playbook
from app.models.trade import Trade

__all__ = [
    "JournalEntry",
    "Note",
    "Playbook",
    "Trade",
    "TradeDirection",
    "TradeStatus",
]
