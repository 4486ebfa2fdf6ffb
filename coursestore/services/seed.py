"""First-start data: admin account and two demo courses."""
import logging

from coursestore.auth import hash_password
from coursestore.config import Settings
from coursestore.models.course import Course, CourseFile, CourseFileType
from coursestore.models.user import User, UserRole, Theme
from coursestore.repositories.store import CourseStore

logger = logging.getLogger(__name__)


def demo_courses() -> list[Course]:
    return [
        Course(
            id="c1",
            title="Complete PHP Mastery 2024",
            description="Learn PHP from scratch to advanced. Includes 50+ projects and real-world scenarios.",
            price=1500,
            thumbnail="https://picsum.photos/400/225?random=1",
            banner="https://picsum.photos/800/400?random=101",
            sample_images=[
                "https://picsum.photos/400/225?random=10",
                "https://picsum.photos/400/225?random=11",
            ],
            unlock_ads_required=5,
            files=[
                CourseFile(id="f1", name="Intro.mp4", type=CourseFileType.VIDEO, size="50MB"),
                CourseFile(id="f2", name="SourceCode.zip", type=CourseFileType.ZIP, size="120MB"),
            ],
        ),
        Course(
            id="c2",
            title="React Native for Beginners",
            description="Build mobile apps with React Native. Zero to Hero.",
            price=2000,
            thumbnail="https://picsum.photos/400/225?random=2",
            banner="https://picsum.photos/800/400?random=102",
            unlock_ads_required=10,
            files=[CourseFile(id="f3", name="Guide.pdf", type=CourseFileType.PDF, size="5MB")],
        ),
    ]


def seed_store(store: CourseStore, settings: Settings) -> list[str]:
    admin = User(
        id="admin-1",
        username=settings.admin_username,
        email=settings.admin_email,
        password_hash=hash_password(settings.admin_password),
        role=UserRole.ADMIN,
        theme=Theme.PIZZA,
    )
    created = store.seed_defaults(admin, demo_courses())
    if created:
        logger.info("Seeded collections: %s", ", ".join(created))
    return created
