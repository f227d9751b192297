from voicenotes.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all
from voicenotes.models.note import Note  # noqa: F401
from voicenotes.models.note_entry import NoteEntry  # noqa: F401
from voicenotes.models.activity import NoteActivity  # noqa: F401
