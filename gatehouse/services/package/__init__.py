from gatehouse.services.package.package_service import PackageService, PickupEmail, send_pickup_email

__all__ = ["PackageService", "PickupEmail", "send_pickup_email"]
