from sikshasetu.models.identity import Identity, AuthSession
from sikshasetu.models.profile import Profile
from sikshasetu.models.post import Post
from sikshasetu.models.verification_document import VerificationDocument
