from coursestore.models.storage_entry import StorageEntry
from coursestore.models.user import User, UserRole, Theme
from coursestore.models.course import Course, CourseFile, CourseFileType, FileSourceType
from coursestore.models.buy_request import BuyRequest, BuyRequestStatus, PaymentMethod
from coursestore.models.purchase import Purchase, PurchaseType
from coursestore.models.ad_watch import AdWatch
from coursestore.models.download import DownloadRecord

__all__ = [
    "StorageEntry", "User", "UserRole", "Theme", "Course", "CourseFile", "CourseFileType",
    "FileSourceType", "BuyRequest", "BuyRequestStatus", "PaymentMethod", "Purchase", "PurchaseType",
    "AdWatch", "DownloadRecord",
]
