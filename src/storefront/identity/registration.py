"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import Conflict
from storefront.identity.user import User, UserRole


@storefront.command(part_of="User")
class RegisterUser:
    """Record a user authenticated by the identity provider."""

    external_id = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    name = String(max_length=255)
    role = String(choices=UserRole, default=UserRole.CUSTOMER.value)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        email = command.email.strip().lower()

        if repo._dao.query.filter(email=email).all().items:
            raise Conflict(f"A user with email {email} already exists", {"email": email})
        if repo._dao.query.filter(external_id=command.external_id).all().items:
            raise Conflict(
                f"A user with external id {command.external_id} already exists",
                {"external_id": command.external_id},
            )

        user = User.register(
            external_id=command.external_id,
            email=email,
            name=command.name,
            role=command.role,
        )
        repo.add(user)
        return str(user.id)


def find_user(user_id=None, external_id=None, email=None):
    """Look up a user by id, provider subject or email; ``None`` when absent."""
    repo = current_domain.repository_for(User)
    if user_id:
        try:
            return repo.get(user_id)
        except ObjectNotFoundError:
            return None
    if external_id:
        results = repo._dao.query.filter(external_id=external_id).all().items
    elif email:
        results = repo._dao.query.filter(email=email.strip().lower()).all().items
    else:
        return None
    return results[0] if results else None
