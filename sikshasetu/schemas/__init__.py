from sikshasetu.schemas.profiles import ProfileOut, AuthorOut, ProfileRepairRequest
from sikshasetu.schemas.posts import PostCreateRequest, PostUpdateRequest, PostOut, ClaimResponse
from sikshasetu.schemas.auth import RegisterRequest, LoginRequest, TokenResponse, RegisterResponse, MeResponse
from sikshasetu.schemas.verification import VerificationStatusResponse, VerificationUploadResponse
