GUESTS_URL = "/api/v1/guests"
GUEST_URL = "/api/v1/guests/{guest_id}"
GUEST_TAGS_URL = "/api/v1/guests/{guest_id}/tags"
GUEST_LOOKUP_URL = "/api/v1/guests/lookup/{identifier}"

TAGS_URL = "/api/v1/tags"
TAG_URL = "/api/v1/tags/{tag_id}"
TAG_GUESTS_URL = "/api/v1/tags/{tag_id}/guests"

VERIFY_GUEST_URL = "/api/v1/check-in"

RSVP_URL = "/api/v1/rsvp/{identifier}"
