"""initial album schema

Revision ID: e1a2b3c4d5f6
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'e1a2b3c4d5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'families',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('viewer_pin_hash', sa.String(length=255), nullable=False),
        sa.Column('editor_pin_hash', sa.String(length=255), nullable=False),
        sa.Column('profile_picture_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('families', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_families_phone_number'), ['phone_number'], unique=True)

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('token_hash', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('revoked', sa.Boolean(), nullable=False),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('sessions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_sessions_family_id'), ['family_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_sessions_token_hash'), ['token_hash'], unique=True)

    op.create_table(
        'photos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('file_url', sa.String(length=1024), nullable=True),
        sa.Column('file_type', sa.String(length=20), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=True),
        sa.Column('file_urls', sa.JSON(), nullable=True),
        sa.Column('cover_index', sa.Integer(), nullable=True),
        sa.Column('category', sa.String(length=80), nullable=True),
        sa.Column('hashtags', sa.JSON(), nullable=True),
        sa.Column('custom_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('photos', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_photos_family_id'), ['family_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_photos_category'), ['category'], unique=False)
        batch_op.create_index(batch_op.f('ix_photos_created_at'), ['created_at'], unique=False)

    op.create_table(
        'children',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('profile_picture_url', sa.String(length=512), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('children', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_children_family_id'), ['family_id'], unique=False)

    op.create_table(
        'child_posts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('child_id', sa.Integer(), nullable=False),
        sa.Column('photo_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['child_id'], ['children.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['photo_id'], ['photos.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('child_id', 'photo_id', name='uq_child_posts_child_photo')
    )
    with op.batch_alter_table('child_posts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_child_posts_child_id'), ['child_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_child_posts_photo_id'), ['photo_id'], unique=False)

    op.create_table(
        'family_categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=False),
        sa.Column('category_value', sa.String(length=80), nullable=False),
        sa.Column('category_label', sa.String(length=120), nullable=False),
        sa.Column('category_emoji', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('family_id', 'category_value', name='uq_family_categories_value')
    )
    with op.batch_alter_table('family_categories', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_family_categories_family_id'), ['family_id'], unique=False)

    op.create_table(
        'album_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=False),
        sa.Column('is_multi_child', sa.Boolean(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('family_id')
    )

    op.create_table(
        'skills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=False),
        sa.Column('skill_name', sa.String(length=120), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('skills', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_skills_family_id'), ['family_id'], unique=False)

    op.create_table(
        'skills_progress',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=False),
        sa.Column('skill_id', sa.String(length=40), nullable=False),
        sa.Column('skill_name', sa.String(length=160), nullable=True),
        sa.Column('skill_category', sa.String(length=40), nullable=True),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('family_id', 'skill_id', name='uq_skills_progress_family_skill')
    )
    with op.batch_alter_table('skills_progress', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_skills_progress_family_id'), ['family_id'], unique=False)

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('entity', sa.String(length=80), nullable=True),
        sa.Column('entity_id', sa.String(length=80), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('metadata_json', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade():
    op.drop_table('audit_logs')

    with op.batch_alter_table('skills_progress', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_skills_progress_family_id'))
    op.drop_table('skills_progress')

    with op.batch_alter_table('skills', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_skills_family_id'))
    op.drop_table('skills')

    op.drop_table('album_settings')

    with op.batch_alter_table('family_categories', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_family_categories_family_id'))
    op.drop_table('family_categories')

    with op.batch_alter_table('child_posts', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_child_posts_photo_id'))
        batch_op.drop_index(batch_op.f('ix_child_posts_child_id'))
    op.drop_table('child_posts')

    with op.batch_alter_table('children', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_children_family_id'))
    op.drop_table('children')

    with op.batch_alter_table('photos', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_photos_created_at'))
        batch_op.drop_index(batch_op.f('ix_photos_category'))
        batch_op.drop_index(batch_op.f('ix_photos_family_id'))
    op.drop_table('photos')

    with op.batch_alter_table('sessions', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_sessions_token_hash'))
        batch_op.drop_index(batch_op.f('ix_sessions_family_id'))
    op.drop_table('sessions')

    with op.batch_alter_table('families', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_families_phone_number'))
    op.drop_table('families')
