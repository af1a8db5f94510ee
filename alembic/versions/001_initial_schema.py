"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Files 表
    op.create_table(
        'files',
        sa.Column('file_seq', sa.String(36), primary_key=True),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_url', sa.String(1000), nullable=False),
        sa.Column('file_type', sa.String(100), nullable=False),
        *_timestamps(),
    )

    # File details 表（随 files 级联删除）
    op.create_table(
        'file_details',
        sa.Column('file_detail_seq', sa.String(36), primary_key=True),
        sa.Column('file_seq', sa.String(36), sa.ForeignKey('files.file_seq', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_path', sa.String(1000), nullable=False),
        sa.Column('file_size', sa.Integer, nullable=False),
        sa.Column('file_extension', sa.String(20), nullable=False, server_default=''),
        sa.Column('file_sn', sa.Integer, nullable=False, server_default='0'),
        *_timestamps(),
    )

    # Sites 表（logo_image 为弱引用，不建外键）
    op.create_table(
        'sites',
        sa.Column('site_seq', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('is_recommend', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('recommend_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('subscriber_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('view_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('avg_rating', sa.Float, nullable=False, server_default='0'),
        sa.Column('logo_image', sa.String(36)),
        *_timestamps(),
    )
    op.create_index('ix_sites_name', 'sites', ['name'])
    op.create_index('ix_sites_type', 'sites', ['type'])
    op.create_index('ix_sites_status', 'sites', ['status'])

    # Site infos 表（与 sites 一对一，级联删除）
    op.create_table(
        'site_infos',
        sa.Column('site_info_seq', sa.String(36), primary_key=True),
        sa.Column('site_seq', sa.String(36), sa.ForeignKey('sites.site_seq', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('deposit_min', sa.Integer, nullable=False, server_default='0'),
        sa.Column('first_bonus', sa.Float, nullable=False, server_default='0'),
        sa.Column('repeat_bonus', sa.Float, nullable=False, server_default='0'),
        sa.Column('daily_first_bonus', sa.Float, nullable=False, server_default='0'),
        sa.Column('casino_payback', sa.Float, nullable=False, server_default='0'),
        sa.Column('slot_payback', sa.Float, nullable=False, server_default='0'),
        sa.Column('sport_payback', sa.Float, nullable=False, server_default='0'),
        sa.Column('rolling_rate', sa.Float, nullable=False, server_default='0'),
        sa.Column('bet_limit_min', sa.Integer, nullable=False, server_default='0'),
        sa.Column('bet_limit_max', sa.Integer, nullable=False, server_default='0'),
        sa.Column('casino_comp', sa.Float, nullable=False, server_default='0'),
        sa.Column('slot_comp', sa.Float, nullable=False, server_default='0'),
        sa.Column('casino_bonus', sa.Float, nullable=False, server_default='0'),
        sa.Column('slot_bonus', sa.Float, nullable=False, server_default='0'),
        sa.Column('sport_bonus', sa.Float, nullable=False, server_default='0'),
        sa.Column('site_feature', sa.Text),
        sa.Column('deposit_method', sa.String(100)),
        sa.Column('withdrawal_method', sa.String(100)),
        *_timestamps(),
    )

    # Site deposit promotions 表（级联删除）
    op.create_table(
        'site_deposit_promotions',
        sa.Column('promotion_seq', sa.String(36), primary_key=True),
        sa.Column('site_seq', sa.String(36), sa.ForeignKey('sites.site_seq', ondelete='CASCADE'), nullable=False),
        sa.Column('promotion_name', sa.String(200), nullable=False),
        sa.Column('deposit_type', sa.String(20), nullable=False, server_default='first'),
        sa.Column('bonus_rate', sa.Float, nullable=False),
        sa.Column('bonus_amount', sa.Float, nullable=False),
        sa.Column('min_deposit', sa.Integer, nullable=False, server_default='0'),
        sa.Column('max_bonus', sa.Integer, nullable=False, server_default='0'),
        sa.Column('rollover_requirement', sa.Float, nullable=False, server_default='0'),
        sa.Column('valid_days', sa.Integer, nullable=False, server_default='30'),
        sa.Column('description', sa.Text),
        sa.Column('terms_conditions', sa.Text),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_site_deposit_promotions_site_seq', 'site_deposit_promotions', ['site_seq'])

    # Site events 表（级联删除；thumbnail_image 为弱引用）
    op.create_table(
        'site_events',
        sa.Column('site_event_seq', sa.String(36), primary_key=True),
        sa.Column('site_seq', sa.String(36), sa.ForeignKey('sites.site_seq', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('event_type', sa.String(20), nullable=False, server_default='bonus'),
        sa.Column('status', sa.String(20), nullable=False, server_default='before'),
        sa.Column('start_date', sa.DateTime(timezone=True)),
        sa.Column('end_date', sa.DateTime(timezone=True)),
        sa.Column('is_featured', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('view_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('thumbnail_image', sa.String(36)),
        *_timestamps(),
    )
    op.create_index('ix_site_events_site_seq', 'site_events', ['site_seq'])

    # User infos 表
    op.create_table(
        'user_infos',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('uid', sa.String(36), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False, server_default=''),
        sa.Column('nick_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('level', sa.Integer, nullable=False, server_default='1'),
        sa.Column('current_exp', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_exp', sa.Integer, nullable=False, server_default='0'),
        sa.Column('point_balance', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_earned_point', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_used_point', sa.Integer, nullable=False, server_default='0'),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('approval_yn', sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_user_infos_email', 'user_infos', ['email'])


def downgrade() -> None:
    op.drop_table('user_infos')
    op.drop_table('site_events')
    op.drop_table('site_deposit_promotions')
    op.drop_table('site_infos')
    op.drop_table('sites')
    op.drop_table('file_details')
    op.drop_table('files')
