"""
Default content inserted on first initialization of either backend.

The memory backend loads it at construction; the database initializer
inserts it only when the sentinel check finds an empty services table.
"""
from __future__ import annotations

import structlog
from passlib.context import CryptContext

from models.schemas import (
    AdminUserCreate, ContactInfoCreate, CvDataCreate, ProjectCreate,
    ServiceCreate, SiteSettingCreate,
)

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """False for a wrong password or a stored hash this context cannot read."""
    try:
        return pwd_context.verify(password, hashed)
    except ValueError as e:
        logger.warning("password_hash_unrecognized", error=str(e))
        return False


def admin_user(username: str, email: str, password: str) -> AdminUserCreate:
    return AdminUserCreate(username=username, email=email, password=hash_password(password))


SERVICES: list[ServiceCreate] = [
    ServiceCreate(
        title="تطوير مواقع الويب",
        title_en="Web Development",
        description="تطوير مواقع ويب متجاوبة وسريعة باستخدام أحدث التقنيات",
        description_en="Developing responsive and fast websites using the latest technologies",
        icon="Code",
        color="blue",
        features=["React", "Next.js", "TypeScript", "Tailwind CSS"],
        features_en=["React", "Next.js", "TypeScript", "Tailwind CSS"],
        order=1,
    ),
    ServiceCreate(
        title="تطبيقات الهاتف المحمول",
        title_en="Mobile Applications",
        description="تطوير تطبيقات هاتف محمول متقدمة لنظامي iOS و Android",
        description_en="Developing advanced mobile apps for iOS and Android",
        icon="Smartphone",
        color="green",
        features=["React Native", "Flutter", "Native iOS", "Native Android"],
        features_en=["React Native", "Flutter", "Native iOS", "Native Android"],
        order=2,
    ),
    ServiceCreate(
        title="قواعد البيانات",
        title_en="Database Management",
        description="تصميم وإدارة قواعد البيانات المتطورة والآمنة",
        description_en="Designing and managing advanced and secure databases",
        icon="Database",
        color="purple",
        features=["PostgreSQL", "MongoDB", "MySQL", "Redis"],
        features_en=["PostgreSQL", "MongoDB", "MySQL", "Redis"],
        order=3,
    ),
]

PROJECTS: list[ProjectCreate] = [
    ProjectCreate(
        title="موقع الشركة الشخصي",
        title_en="Personal Company Website",
        description="موقع ويب شخصي متطور لعرض الخدمات والمشاريع مع دعم اللغتين العربية والإنجليزية",
        description_en="Advanced personal website to showcase services and projects with Arabic and English support",
        short_description="موقع شخصي متجاوب",
        short_description_en="Responsive personal website",
        technologies=["React", "TypeScript", "Tailwind CSS", "Node.js"],
        images=[],
        live_url="",
        github_url="",
        category="web",
        is_featured=True,
        order=1,
    ),
]

CONTACT_INFO: list[ContactInfoCreate] = [
    ContactInfoCreate(
        type="email", label="البريد الإلكتروني", label_en="Email",
        value="contact@alqudimi.com", icon="Mail", is_primary=True, order=1,
    ),
    ContactInfoCreate(
        type="phone", label="رقم الهاتف", label_en="Phone Number",
        value="+966 50 123 4567", icon="Phone", order=2,
    ),
    ContactInfoCreate(
        type="address", label="الموقع", label_en="Location",
        value="الرياض، المملكة العربية السعودية", icon="MapPin", order=3,
    ),
]

CV_DATA: list[CvDataCreate] = [
    CvDataCreate(
        type="personal",
        title="عبدالعزيز محمد القديمي",
        title_en="Abdulaziz Mohammed Alqudimi",
        description="مطور برمجيات متخصص في تطوير الويب والتطبيقات بخبرة واسعة في التقنيات الحديثة",
        description_en="Software developer specialized in web and app development with extensive experience in modern technologies",
        subtitle="مطور برمجيات",
        subtitle_en="Software Developer",
        location="الرياض، السعودية",
        location_en="Riyadh, Saudi Arabia",
        order=1,
    ),
    CvDataCreate(
        type="skill",
        title="React",
        title_en="React",
        description="مكتبة جافا سكريبت لبناء واجهات المستخدم التفاعلية",
        description_en="JavaScript library for building interactive user interfaces",
        level=5,
        icon="Code",
        skills=["React", "Redux", "Context API", "Hooks", "JSX"],
        order=1,
    ),
    CvDataCreate(
        type="skill",
        title="Node.js",
        title_en="Node.js",
        description="بيئة تشغيل جافا سكريبت للخادم مع إمكانيات متقدمة",
        description_en="JavaScript runtime for server-side development with advanced capabilities",
        level=4,
        icon="Server",
        skills=["Express", "NestJS", "API Development", "Database Integration"],
        order=2,
    ),
]

SITE_SETTINGS: list[SiteSettingCreate] = [
    SiteSettingCreate(
        key="site_name", value="تقنية القديمي - Alqudimi Technology",
        category="general", description="اسم الموقع", description_en="Site name",
    ),
    SiteSettingCreate(
        key="site_description", value="تطوير مواقع ويب وتطبيقات متقدمة بأحدث التقنيات",
        category="general", description="وصف الموقع", description_en="Site description",
    ),
    SiteSettingCreate(
        key="theme_color", value="#3B82F6",
        category="appearance", description="اللون الأساسي للموقع", description_en="Primary site color",
    ),
    SiteSettingCreate(
        key="contact_email", value="contact@alqudimi.com",
        category="contact", description="البريد الإلكتروني للتواصل", description_en="Contact email address",
    ),
]
