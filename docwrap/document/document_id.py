import secrets
import string


ID_CHARACTERS = string.ascii_letters + string.digits
ID_LENGTH = 24

def random_id(length: int = ID_LENGTH) -> str:
	return ''.join(secrets.choice(ID_CHARACTERS) for _ in range(length))

class DocumentId(str):
	""" A client-generated document identity.
	Documents that set __id_factory__ = DocumentId get one of these assigned at insert time, instead of the ObjectId the store would otherwise assign. """
	def __new__(cls, _id: str | None = None):
		if not _id:
			_id = random_id()
		return super().__new__(cls, _id)

	@classmethod
	def with_prefix(cls, prefix: str) -> 'DocumentId':
		""" e.g. DocumentId.with_prefix("usr") -> "usr" followed by 24 random characters. """
		if len(prefix) != 3:
			raise ValueError("DocumentId prefix should be 3 characters.")
		return cls(prefix + random_id())
