"""Initial schema: users, streaks, relapse journal, content, community.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            email VARCHAR(320) UNIQUE,
            password_hash VARCHAR(256),
            auth_method VARCHAR(16) NOT NULL DEFAULT 'email',
            display_name VARCHAR(64) NOT NULL DEFAULT 'Anonymous',
            is_anonymous BOOLEAN NOT NULL DEFAULT false,
            is_banned BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            last_login TIMESTAMPTZ,
            login_count INTEGER NOT NULL DEFAULT 0
        )
    """)

    # --- Streaks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS streak_states (
            user_id BIGINT PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            start_date TIMESTAMPTZ,
            has_started_journey BOOLEAN NOT NULL DEFAULT false,
            times_failed INTEGER NOT NULL DEFAULT 0 CHECK (times_failed >= 0),
            urges_resisted INTEGER NOT NULL DEFAULT 0 CHECK (urges_resisted >= 0),
            last_active_at TIMESTAMPTZ,
            last_relapse_check_at TIMESTAMPTZ,
            updated_at TIMESTAMPTZ
        )
    """)

    # --- Relapse journal ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS relapse_logs (
            id VARCHAR(36) PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            occurred_at TIMESTAMPTZ NOT NULL,
            notes TEXT,
            triggers JSON NOT NULL DEFAULT '[]',
            emotions JSON NOT NULL DEFAULT '[]',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_relapse_logs_user_occurred
        ON relapse_logs(user_id, occurred_at DESC)
    """)

    # --- Content ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS article_completions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            article_slug VARCHAR(128) NOT NULL,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            UNIQUE(user_id, article_slug)
        )
    """)

    # --- Community ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS posts (
            id BIGSERIAL PRIMARY KEY,
            author_id BIGINT REFERENCES users(id) ON DELETE SET NULL,
            author_name VARCHAR(64) NOT NULL,
            title VARCHAR(200) NOT NULL,
            content TEXT NOT NULL,
            likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
            comment_count INTEGER NOT NULL DEFAULT 0 CHECK (comment_count >= 0),
            is_featured BOOLEAN NOT NULL DEFAULT false,
            streak INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_posts_author ON posts(author_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_posts_created ON posts(created_at DESC)")
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_posts_featured
        ON posts(created_at DESC) WHERE is_featured
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS comments (
            id VARCHAR(36) PRIMARY KEY,
            post_id BIGINT NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
            author_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            author_name VARCHAR(64) NOT NULL,
            content TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_comments_post ON comments(post_id, created_at)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_comments_author ON comments(author_id)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS post_likes (
            id BIGSERIAL PRIMARY KEY,
            post_id BIGINT NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            UNIQUE(post_id, user_id)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_post_likes_user ON post_likes(user_id)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS user_blocks (
            id BIGSERIAL PRIMARY KEY,
            blocker_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            blocked_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            UNIQUE(blocker_id, blocked_id),
            CHECK (blocker_id <> blocked_id)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS reports (
            id BIGSERIAL PRIMARY KEY,
            reporter_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            reported_user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            reason VARCHAR(500),
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_reports_reported ON reports(reported_user_id)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reports CASCADE")
    op.execute("DROP TABLE IF EXISTS user_blocks CASCADE")
    op.execute("DROP TABLE IF EXISTS post_likes CASCADE")
    op.execute("DROP TABLE IF EXISTS comments CASCADE")
    op.execute("DROP TABLE IF EXISTS posts CASCADE")
    op.execute("DROP TABLE IF EXISTS article_completions CASCADE")
    op.execute("DROP TABLE IF EXISTS relapse_logs CASCADE")
    op.execute("DROP TABLE IF EXISTS streak_states CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
