"""Create accounts table and owner columns

Revision ID: 003
Revises: 002
Create Date: 2026-10-18 00:00:02.000000+00:00

What:  Adds `accounts` (unique email with a format CHECK, argon2 password
       hash) and the `account_id` owner column on questions and answers.

Existing questions and answers have no owner to backfill, so the owner
columns are added NOT NULL only on an empty database. Run this revision
before any content is written.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Mirrors qna.schemas.auth.EMAIL_PATTERN
EMAIL_CHECK = r"email ~ '^\w+@[a-zA-Z_]+?\.[a-zA-Z]{2,3}$'"


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False, comment="Login name; unique across accounts"),
        sa.Column("password", sa.String(255), nullable=False, comment="Argon2 password hash"),
        sa.PrimaryKeyConstraint("id", name="pk_accounts"),
        sa.UniqueConstraint("email", name="uq_accounts_email"),
        sa.CheckConstraint(EMAIL_CHECK, name="ck_accounts_email_format"),
    )

    op.add_column("questions", sa.Column("account_id", sa.Integer(), nullable=False))
    op.create_foreign_key(
        "fk_questions_account_id", "questions", "accounts", ["account_id"], ["id"]
    )
    op.create_index("ix_questions_account_id", "questions", ["account_id"])

    op.add_column("answers", sa.Column("account_id", sa.Integer(), nullable=False))
    op.create_foreign_key(
        "fk_answers_account_id", "answers", "accounts", ["account_id"], ["id"]
    )


def downgrade() -> None:
    op.drop_constraint("fk_answers_account_id", "answers", type_="foreignkey")
    op.drop_column("answers", "account_id")

    op.drop_index("ix_questions_account_id", table_name="questions")
    op.drop_constraint("fk_questions_account_id", "questions", type_="foreignkey")
    op.drop_column("questions", "account_id")

    op.drop_table("accounts")
