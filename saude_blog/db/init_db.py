"""Database initialization utilities for local development and tests."""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, col, select

from saude_blog.core.config import Settings
from saude_blog.core.security import hash_password
from saude_blog.models import AdminUser, Post
from saude_blog.schemas.post import PostCreateInput
from saude_blog.services import post_service

logger = logging.getLogger(__name__)

SAMPLE_POSTS: tuple[dict[str, object], ...] = (
    {
        "title": "Introdução à Saúde Pública: Conceitos Fundamentais",
        "slug": "introducao-saude-publica-conceitos-fundamentais",
        "excerpt": (
            "Explore os conceitos básicos e a importância da saúde pública "
            "para o bem-estar da população brasileira."
        ),
        "content": (
            "# Introdução à Saúde Pública\n\n"
            "A saúde pública é **a arte e a ciência de prevenir doenças, prolongar a vida "
            "e promover a saúde** através dos esforços organizados da sociedade.\n\n"
            "## Pilares\n\n"
            "1. Prevenção de doenças\n2. Promoção da saúde\n"
            "3. Vigilância epidemiológica\n4. Educação em saúde\n"
        ),
        "published": True,
        "category": "educacao",
        "tags": ["saúde pública", "conceitos básicos", "SUS", "educação"],
        "meta_title": "Introdução à Saúde Pública: Guia dos Conceitos Fundamentais",
    },
    {
        "title": "Epidemiologia: A Ciência por Trás da Prevenção",
        "slug": "epidemiologia-ciencia-prevencao",
        "excerpt": "Entenda como a epidemiologia ajuda a compreender e controlar doenças.",
        "content": (
            "# Epidemiologia\n\n"
            "A epidemiologia estuda a distribuição e os determinantes de eventos "
            "relacionados à saúde em populações específicas.\n\n"
            "- **Quem** é afetado\n- **Onde** os casos ocorrem\n- **Quando** surgem\n"
        ),
        "published": True,
        "category": "epidemiologia",
        "tags": ["epidemiologia", "pesquisa", "prevenção"],
    },
    {
        "title": "Tecnologia e Inovação na Saúde Pública",
        "slug": "tecnologia-inovacao-saude-publica",
        "excerpt": (
            "Como a tecnologia está mudando a forma de enfrentar desafios da saúde pública."
        ),
        "content": (
            "# Tecnologia e Inovação\n\n"
            "Telemedicina, big data e inteligência artificial ampliam o alcance "
            "dos serviços de saúde.\n"
        ),
        "published": True,
        "category": "featured",
        "tags": ["tecnologia", "inovação", "telemedicina"],
        "featured_image": "https://images.unsplash.com/photo-1576091160399-112ba8d25d1f",
    },
    {
        "title": "Políticas Públicas de Saúde no Brasil: Conquistas e Desafios",
        "slug": "politicas-publicas-saude-brasil",
        "excerpt": "Uma análise das principais políticas de saúde brasileiras.",
        "content": (
            "# Políticas Públicas de Saúde\n\n"
            "O SUS garante acesso universal e gratuito, mas enfrenta desafios "
            "de financiamento e gestão.\n"
        ),
        "published": False,
        "category": "politicas",
        "tags": ["SUS", "políticas públicas", "Brasil"],
    },
)


def create_db_and_tables(engine: Engine) -> None:
    """Create all tables from SQLModel metadata."""

    SQLModel.metadata.create_all(engine)


def create_initial_admin(engine: Engine, settings: Settings) -> None:
    """Seed an initial admin user when not present."""

    with Session(engine) as session:
        existing_user = session.exec(
            select(AdminUser).where(col(AdminUser.username) == settings.admin_username)
        ).first()
        if existing_user is not None:
            return

        session.add(
            AdminUser(
                username=settings.admin_username,
                password_hash=hash_password(settings.admin_password),
            )
        )
        session.commit()
        logger.info("Seeded admin user %s", settings.admin_username)


def seed_sample_posts(engine: Engine) -> int:
    """Insert the sample posts into an empty table; return how many were created."""

    with Session(engine) as session:
        if session.exec(select(Post.id)).first() is not None:
            return 0

        for sample in SAMPLE_POSTS:
            post = post_service.create_post(session, PostCreateInput.model_validate(sample))
            logger.info("Seeded sample post %s", post.slug)
    return len(SAMPLE_POSTS)


def init_db(engine: Engine, settings: Settings) -> None:
    """Initialize tables, admin account and optional sample content."""

    create_db_and_tables(engine)
    create_initial_admin(engine, settings)
    if settings.seed_sample_posts:
        seed_sample_posts(engine)
