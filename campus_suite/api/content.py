"""Banner and notification routes."""
from typing import Optional

from fastapi import APIRouter, Depends

from campus_suite.api.deps import get_store, ok
from campus_suite.core.auth import get_current_user, require_admin
from campus_suite.domain.content import (
    BannerCreate,
    BannerUpdate,
    NotificationCategory,
    NotificationCreate,
    NotificationUpdate,
)
from campus_suite.domain.user import User
from campus_suite.services.banners import BannerService
from campus_suite.services.notifications import NotificationService

router = APIRouter()


# -----------------
# BANNERS
# -----------------

@router.post("/banners", status_code=201, tags=["banners"])
def create_banner(req: BannerCreate, store=Depends(get_store), admin: User = Depends(require_admin)):
    """Create a banner. Each screen/position/priority slot holds one banner (409 otherwise)."""
    return ok(BannerService(store).create(req))


@router.get("/banners", tags=["banners"])
def list_banners(
    screen: Optional[str] = None,
    position: Optional[str] = None,
    store=Depends(get_store),
):
    """Active banners, ordered by priority then newest."""
    banners = BannerService(store).list(screen=screen, position=position)
    return ok(banners, count=len(banners))


@router.get("/banners/all", tags=["banners"])
def list_all_banners(
    screen: Optional[str] = None,
    position: Optional[str] = None,
    store=Depends(get_store),
    admin: User = Depends(require_admin),
):
    banners = BannerService(store).list(screen=screen, position=position, include_inactive=True)
    return ok(banners, count=len(banners))


@router.put("/banners/{banner_id}", tags=["banners"])
def update_banner(banner_id: int, req: BannerUpdate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(BannerService(store).update(banner_id, req))


@router.delete("/banners/{banner_id}", tags=["banners"])
def delete_banner(banner_id: int, store=Depends(get_store), admin: User = Depends(require_admin)):
    BannerService(store).delete(banner_id)
    return ok(message="Banner deleted successfully")


# -----------------
# NOTIFICATIONS
# -----------------

@router.get("/notifications", tags=["notifications"])
def my_notifications(
    category: Optional[NotificationCategory] = None,
    store=Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Notifications visible to the caller, newest first."""
    return ok(NotificationService(store).list_for_user(current_user, category))


@router.get("/notifications/unread-count", tags=["notifications"])
def unread_count(store=Depends(get_store), current_user: User = Depends(get_current_user)):
    return ok(count=NotificationService(store).unread_count(current_user))


@router.patch("/notifications/{notification_id}/read", tags=["notifications"])
def mark_notification_read(
    notification_id: int,
    store=Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    NotificationService(store).mark_read(notification_id, current_user)
    return ok(message="Notification marked as read")


@router.post("/notifications", status_code=201, tags=["notifications"])
def create_notification(req: NotificationCreate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(NotificationService(store).announce(req), message="Notification sent successfully")


@router.get("/notifications/all", tags=["notifications"])
def list_all_notifications(store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(NotificationService(store).list_all())


@router.put("/notifications/{notification_id}", tags=["notifications"])
def update_notification(
    notification_id: int,
    req: NotificationUpdate,
    store=Depends(get_store),
    admin: User = Depends(require_admin),
):
    return ok(NotificationService(store).update(notification_id, req), message="Notification updated successfully")


@router.delete("/notifications/{notification_id}", tags=["notifications"])
def delete_notification(notification_id: int, store=Depends(get_store), admin: User = Depends(require_admin)):
    NotificationService(store).delete(notification_id)
    return ok(message="Notification deleted successfully")
