# Import every model so the declarative registry (and Alembic) sees all tables.
from app.api.users.models import Users, UserRoles
from app.api.ngos.models import NGOProfiles
from app.api.events.models import Events
from app.api.applications.models import VolunteerApplications
