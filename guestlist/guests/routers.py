from fastapi import APIRouter

from .features.create_guest.router import router as create_guest_router
from .features.delete_guest.router import router as delete_guest_router
from .features.get_guests.router import router as get_guests_router
from .features.manage_tags.router import router as manage_tags_router
from .features.submit_rsvp.router import router as submit_rsvp_router
from .features.update_guest.router import router as update_guest_router
from .features.verify_guest.router import router as verify_guest_router

router = APIRouter()

router.include_router(get_guests_router)
router.include_router(create_guest_router)
router.include_router(update_guest_router)
router.include_router(delete_guest_router)
router.include_router(manage_tags_router)
router.include_router(verify_guest_router)
router.include_router(submit_rsvp_router)
