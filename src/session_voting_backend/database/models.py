from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKeyConstraint, Identity, Index, Integer, PrimaryKeyConstraint, String, Table, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
# Aliased: TimeSlots has a column named 'datetime'.
import datetime as dt

class Base(DeclarativeBase):
    pass


t_vote_time_slots = Table(
    'vote_time_slots', Base.metadata,
    Column('vote_id', Integer, primary_key=True),
    Column('time_slot_id', Integer, primary_key=True),
    ForeignKeyConstraint(['vote_id'], ['votes.id'], ondelete='CASCADE', name='vote_time_slots_vote_id_fkey'),
    ForeignKeyConstraint(['time_slot_id'], ['time_slots.id'], ondelete='CASCADE', name='vote_time_slots_time_slot_id_fkey'),
)


t_vote_preferred_time_slots = Table(
    'vote_preferred_time_slots', Base.metadata,
    Column('vote_id', Integer, primary_key=True),
    Column('time_slot_id', Integer, primary_key=True),
    ForeignKeyConstraint(['vote_id'], ['votes.id'], ondelete='CASCADE', name='vote_preferred_time_slots_vote_id_fkey'),
    ForeignKeyConstraint(['time_slot_id'], ['time_slots.id'], ondelete='CASCADE', name='vote_preferred_time_slots_time_slot_id_fkey'),
)


class VotingWeeks(Base):
    __tablename__ = 'voting_weeks'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='voting_weeks_pkey'),
        # At most one row may carry active = true.
        Index(
            'voting_weeks_single_active_idx', 'active',
            unique=True,
            postgresql_where=text('active'),
            sqlite_where=text('active')
        ),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    deadline: Mapped[dt.date] = mapped_column(Date)
    active: Mapped[bool] = mapped_column(Boolean, server_default=text('false'))

    time_slots: Mapped[list['TimeSlots']] = relationship(
        'TimeSlots',
        back_populates='voting_week',
        cascade='all, delete-orphan',
        order_by='TimeSlots.id'
    )
    votes: Mapped[list['Votes']] = relationship(
        'Votes',
        back_populates='voting_week',
        cascade='all, delete-orphan'
    )

    def __repr__(self) -> str:
        return f"VotingWeeks(id={self.id!r}, deadline={self.deadline!r}, active={self.active!r})"


class TimeSlots(Base):
    __tablename__ = 'time_slots'
    __table_args__ = (
        ForeignKeyConstraint(['voting_week_id'], ['voting_weeks.id'], ondelete='CASCADE', name='time_slots_voting_week_id_fkey'),
        PrimaryKeyConstraint('id', name='time_slots_pkey'),
        Index('time_slots_voting_week_id_idx', 'voting_week_id'),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    datetime: Mapped[dt.datetime] = mapped_column(DateTime)
    voting_week_id: Mapped[int] = mapped_column(Integer)

    voting_week: Mapped['VotingWeeks'] = relationship('VotingWeeks', back_populates='time_slots')

    def __repr__(self) -> str:
        return f"TimeSlots(id={self.id!r}, datetime={self.datetime!r}, voting_week_id={self.voting_week_id!r})"


class Votes(Base):
    __tablename__ = 'votes'
    __table_args__ = (
        ForeignKeyConstraint(['voting_week_id'], ['voting_weeks.id'], ondelete='CASCADE', name='votes_voting_week_id_fkey'),
        PrimaryKeyConstraint('id', name='votes_pkey'),
        UniqueConstraint('voting_week_id', 'voter_name', name='votes_voting_week_id_voter_name_key'),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    voter_name: Mapped[str] = mapped_column(String(50))
    voting_week_id: Mapped[int] = mapped_column(Integer)

    voting_week: Mapped['VotingWeeks'] = relationship('VotingWeeks', back_populates='votes')
    time_slots: Mapped[list['TimeSlots']] = relationship(
        'TimeSlots',
        secondary=t_vote_time_slots,
        order_by='TimeSlots.datetime'
    )
    preferred_time_slots: Mapped[list['TimeSlots']] = relationship(
        'TimeSlots',
        secondary=t_vote_preferred_time_slots,
        order_by='TimeSlots.datetime'
    )

    def __repr__(self) -> str:
        return f"Votes(id={self.id!r}, voter_name={self.voter_name!r}, voting_week_id={self.voting_week_id!r})"
