"""add version counter to products

Revision ID: 7a4d2f6c8e51
Revises: 3c1e9a7d2b10
Create Date: 2026-10-06 16:41:37.552910

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7a4d2f6c8e51'
down_revision: Union[str, Sequence[str], None] = '3c1e9a7d2b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    with op.batch_alter_table("products") as batch_op:
        batch_op.add_column(
            sa.Column("version", sa.Integer(), nullable=False, server_default="1")
        )


def downgrade():
    with op.batch_alter_table("products") as batch_op:
        batch_op.drop_column("version")
