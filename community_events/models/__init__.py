from community_events.models.profile import Profile
from community_events.models.ticket import Ticket
