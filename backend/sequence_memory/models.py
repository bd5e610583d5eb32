from sequence_memory import db


class KeyValue(db.Model):
    """A single named value; the browser's localStorage, server side."""
    __tablename__ = 'key_value'
    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.Text, nullable=True)
