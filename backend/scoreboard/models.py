from datetime import datetime

from flask_login import UserMixin

from scoreboard import bcrypt, db
from scoreboard.services.scoring.formats import MatchType, UPCOMING


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    passcode_hash = db.Column(db.String(128), nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    needs_password_change = db.Column(db.Boolean, default=True, nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=True)
    player = db.relationship('Player', foreign_keys=[player_id])

    def set_passcode(self, passcode):
        self.passcode_hash = bcrypt.generate_password_hash(passcode).decode('utf-8')

    def check_passcode(self, passcode):
        if not passcode:
            return False
        return bcrypt.check_password_hash(self.passcode_hash, passcode)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'is_admin': self.is_admin,
            'needs_password_change': self.needs_password_change,
            'player_id': self.player_id,
        }


class Team(db.Model):
    __tablename__ = 'teams'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    short_name = db.Column(db.String(32), unique=True, nullable=False)  # aviators / producers
    color_code = db.Column(db.String(16), nullable=False)
    players = db.relationship('Player', back_populates='team', order_by='Player.name')

    def to_dict(self, include_players=False):
        data = {
            'id': self.id,
            'name': self.name,
            'short_name': self.short_name,
            'color_code': self.color_code,
        }
        if include_players:
            data['players'] = [p.to_dict() for p in self.players]
        return data


class Player(db.Model):
    __tablename__ = 'players'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id'), nullable=False)
    wins = db.Column(db.Integer, default=0, nullable=False)
    losses = db.Column(db.Integer, default=0, nullable=False)
    ties = db.Column(db.Integer, default=0, nullable=False)
    status = db.Column(db.String(64), nullable=True)
    handicap_index = db.Column(db.Float, nullable=True)
    team = db.relationship('Team', back_populates='players')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'team_id': self.team_id,
            'team': self.team.short_name if self.team else None,
            'wins': self.wins or 0,
            'losses': self.losses or 0,
            'ties': self.ties or 0,
            'status': self.status,
            'handicap_index': self.handicap_index,
        }


class Course(db.Model):
    __tablename__ = 'courses'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False)
    location = db.Column(db.String(128), nullable=True)
    description = db.Column(db.Text, nullable=True)
    course_rating = db.Column(db.Float, nullable=True)
    slope_rating = db.Column(db.Integer, nullable=True)
    par = db.Column(db.Integer, nullable=True)
    holes = db.relationship('Hole', back_populates='course', order_by='Hole.number',
                            cascade='all, delete-orphan')

    def to_dict(self, include_holes=False):
        data = {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'description': self.description,
            'course_rating': self.course_rating,
            'slope_rating': self.slope_rating,
            'par': self.par,
        }
        if include_holes:
            data['holes'] = [h.to_dict() for h in self.holes]
        return data


class Hole(db.Model):
    __tablename__ = 'holes'
    __table_args__ = (db.UniqueConstraint('course_id', 'number', name='uq_holes_course_number'),)
    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.id'), nullable=False)
    number = db.Column(db.Integer, nullable=False)
    par = db.Column(db.Integer, nullable=False)
    handicap_rank = db.Column(db.Integer, nullable=True)  # 1 is the hardest hole
    course = db.relationship('Course', back_populates='holes')

    def to_dict(self):
        return {
            'id': self.id,
            'course_id': self.course_id,
            'number': self.number,
            'par': self.par,
            'handicap_rank': self.handicap_rank,
        }


class Tournament(db.Model):
    __tablename__ = 'tournament'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    aviator_score = db.Column(db.Float, default=0.0, nullable=False)
    producer_score = db.Column(db.Float, default=0.0, nullable=False)
    is_active = db.Column(db.Boolean, default=False, nullable=False)
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)
    rounds = db.relationship('Round', back_populates='tournament', order_by='Round.id')

    # Pending totals are re-derived from the rounds on every read, never stored
    @property
    def pending_aviator_score(self):
        return sum(r.pending_aviator_score or 0.0 for r in self.rounds)

    @property
    def pending_producer_score(self):
        return sum(r.pending_producer_score or 0.0 for r in self.rounds)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'year': self.year,
            'aviator_score': self.aviator_score or 0.0,
            'producer_score': self.producer_score or 0.0,
            'pending_aviator_score': self.pending_aviator_score,
            'pending_producer_score': self.pending_producer_score,
            'is_active': self.is_active,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
        }


class Round(db.Model):
    __tablename__ = 'rounds'
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    match_type = db.Column(db.String(64), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.id'), nullable=True)
    course_name = db.Column(db.String(128), nullable=True)
    date = db.Column(db.String(32), nullable=True)
    start_time = db.Column(db.String(32), nullable=True)
    aviator_score = db.Column(db.Float, default=0.0, nullable=False)
    producer_score = db.Column(db.Float, default=0.0, nullable=False)
    pending_aviator_score = db.Column(db.Float, default=0.0, nullable=False)
    pending_producer_score = db.Column(db.Float, default=0.0, nullable=False)
    is_complete = db.Column(db.Boolean, default=False, nullable=False)
    tournament = db.relationship('Tournament', back_populates='rounds')
    course = db.relationship('Course')
    matches = db.relationship('Match', back_populates='round', order_by='Match.id')

    @property
    def format(self):
        return MatchType.from_label(self.match_type)

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'name': self.name,
            'match_type': self.match_type,
            'course_id': self.course_id,
            'course_name': self.course_name,
            'date': self.date,
            'start_time': self.start_time,
            'aviator_score': self.aviator_score or 0.0,
            'producer_score': self.producer_score or 0.0,
            'pending_aviator_score': self.pending_aviator_score or 0.0,
            'pending_producer_score': self.pending_producer_score or 0.0,
            'is_complete': self.is_complete,
        }


class Match(db.Model):
    __tablename__ = 'matches'
    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey('rounds.id'), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    status = db.Column(db.String(32), default=UPCOMING, nullable=False)  # upcoming, in_progress, completed
    current_hole = db.Column(db.Integer, default=1, nullable=False)
    leading_team = db.Column(db.String(16), nullable=True)
    lead_amount = db.Column(db.Integer, default=0, nullable=False)
    result = db.Column(db.String(16), nullable=True)
    locked = db.Column(db.Boolean, default=False, nullable=False)
    round = db.relationship('Round', back_populates='matches')
    participants = db.relationship('MatchParticipant', back_populates='match', order_by='MatchParticipant.id')
    scores = db.relationship('Score', back_populates='match', order_by='Score.hole_number')

    def to_dict(self, include_participants=True):
        data = {
            'id': self.id,
            'round_id': self.round_id,
            'name': self.name,
            'status': self.status,
            'current_hole': self.current_hole,
            'leading_team': self.leading_team,
            'lead_amount': self.lead_amount or 0,
            'result': self.result,
            'locked': self.locked,
        }
        if include_participants:
            data['participants'] = [p.to_dict() for p in self.participants]
        return data


class MatchParticipant(db.Model):
    __tablename__ = 'match_participants'
    __table_args__ = (db.UniqueConstraint('match_id', 'player_id', name='uq_match_participants_match_player'),)
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False, index=True)
    team = db.Column(db.String(16), nullable=False)
    result = db.Column(db.String(8), nullable=True)  # win, loss, tie once the match completes
    match = db.relationship('Match', back_populates='participants')
    player = db.relationship('Player')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'player_id': self.player_id,
            'player_name': self.player.name if self.player else None,
            'team': self.team,
            'result': self.result,
        }


class Score(db.Model):
    __tablename__ = 'scores'
    __table_args__ = (db.UniqueConstraint('match_id', 'hole_number', name='uq_scores_match_hole'),)
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False, index=True)
    hole_number = db.Column(db.Integer, nullable=False)
    aviator_score = db.Column(db.Integer, nullable=True)
    producer_score = db.Column(db.Integer, nullable=True)
    winning_team = db.Column(db.String(16), nullable=True)
    match_status = db.Column(db.String(8), nullable=True)
    match = db.relationship('Match', back_populates='scores')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'hole_number': self.hole_number,
            'aviator_score': self.aviator_score,
            'producer_score': self.producer_score,
            'winning_team': self.winning_team,
            'match_status': self.match_status,
        }


class TournamentPlayerStat(db.Model):
    __tablename__ = 'tournament_player_stats'
    __table_args__ = (db.UniqueConstraint('tournament_id', 'player_id', name='uq_tournament_player_stats'),)
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False)
    wins = db.Column(db.Integer, default=0, nullable=False)
    losses = db.Column(db.Integer, default=0, nullable=False)
    ties = db.Column(db.Integer, default=0, nullable=False)
    points = db.Column(db.Float, default=0.0, nullable=False)
    matches_played = db.Column(db.Integer, default=0, nullable=False)
    player = db.relationship('Player')

    def to_dict(self):
        return {
            'tournament_id': self.tournament_id,
            'player_id': self.player_id,
            'player_name': self.player.name if self.player else None,
            'wins': self.wins,
            'losses': self.losses,
            'ties': self.ties,
            'points': self.points,
            'matches_played': self.matches_played,
        }


class PlayerCareerStat(db.Model):
    __tablename__ = 'player_career_stats'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), unique=True, nullable=False)
    total_wins = db.Column(db.Integer, default=0, nullable=False)
    total_losses = db.Column(db.Integer, default=0, nullable=False)
    total_ties = db.Column(db.Integer, default=0, nullable=False)
    total_points = db.Column(db.Float, default=0.0, nullable=False)
    tournaments_played = db.Column(db.Integer, default=0, nullable=False)
    matches_played = db.Column(db.Integer, default=0, nullable=False)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'total_wins': self.total_wins,
            'total_losses': self.total_losses,
            'total_ties': self.total_ties,
            'total_points': self.total_points,
            'tournaments_played': self.tournaments_played,
            'matches_played': self.matches_played,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }


class TournamentHistory(db.Model):
    __tablename__ = 'tournament_history'
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournament.id'), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    tournament_name = db.Column(db.String(128), nullable=False)
    winning_team = db.Column(db.String(16), nullable=True)  # null when the cup is tied
    aviator_score = db.Column(db.Float, nullable=True)
    producer_score = db.Column(db.Float, nullable=True)
    location = db.Column(db.String(128), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'year': self.year,
            'tournament_name': self.tournament_name,
            'winning_team': self.winning_team,
            'aviator_score': self.aviator_score,
            'producer_score': self.producer_score,
            'location': self.location,
        }
