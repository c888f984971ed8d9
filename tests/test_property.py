"""
Tests for property types.

Tests cover the Regexp codec, the ParanoidBoolean type and the
PropertyType interface, both directly and through a database round trip.
"""

import re

import pytest
from sqlalchemy import Boolean, Column, Integer, String, create_engine
from sqlalchemy.exc import StatementError
from sqlalchemy.orm import declarative_base, mapped_column, sessionmaker

from propkit.paranoid import ParanoidMixin
from propkit.property import (
    ParanoidBoolean,
    PropertyType,
    Regexp,
    is_boolean_attribute,
    is_paranoid_attribute,
    paranoid_column,
)

Base = declarative_base()


class User(Base):
    """Entity storing a pattern."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    regexp = Column(Regexp)


class Ticket(ParanoidMixin, Base):
    """Entity with a paranoid flag."""

    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True)
    subject = Column(String(100))
    deleted = paranoid_column()


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def regexp_property():
    """Return the type of the regexp column."""
    return User.__table__.c.regexp.type


class TestRegexpLoad:
    """Test Regexp.load."""

    def test_string_is_compiled(self, regexp_property):
        """A stored source becomes a compiled pattern."""
        result = regexp_property.load("[a-z]\\d+")

        assert result == re.compile("[a-z]\\d+")
        assert result.match("a42")

    def test_nil(self, regexp_property):
        """None stays None."""
        assert regexp_property.load(None) is None

    def test_malformed_source(self, regexp_property):
        """Malformed sources raise at the point of conversion."""
        with pytest.raises(re.error):
            regexp_property.load("[a-z")


class TestRegexpDump:
    """Test Regexp.dump."""

    def test_pattern_source(self, regexp_property):
        """The source text is returned unescaped."""
        assert regexp_property.dump(re.compile(r"\d+")) == "\\d+"

    def test_nil(self, regexp_property):
        """None stays None."""
        assert regexp_property.dump(None) is None

    def test_string_is_validated(self, regexp_property):
        """Plain strings are accepted once they compile."""
        assert regexp_property.dump("^ab?$") == "^ab?$"

        with pytest.raises(re.error):
            regexp_property.dump("(unclosed")

    def test_round_trip(self, regexp_property):
        """Loading a dumped pattern keeps the source."""
        source = "[a-z]\\d+"
        assert regexp_property.dump(regexp_property.load(source)) == source

    def test_python_type(self, regexp_property):
        """The native type is a compiled pattern."""
        assert regexp_property.python_type is re.Pattern


class TestRegexpColumn:
    """Test Regexp through the database."""

    def test_stored_and_loaded(self, db_session):
        """Patterns survive a database round trip."""
        user = User(regexp=re.compile(r"^\w+@example\.com$"))
        db_session.add(user)
        db_session.commit()
        db_session.expire_all()

        loaded = db_session.get(User, user.id)
        assert loaded.regexp.pattern == r"^\w+@example\.com$"
        assert loaded.regexp.match("someone@example.com")

    def test_null_stored(self, db_session):
        """A missing pattern is stored as NULL."""
        user = User()
        db_session.add(user)
        db_session.commit()
        db_session.expire_all()

        assert db_session.get(User, user.id).regexp is None

    def test_malformed_source_on_flush(self, db_session):
        """Malformed sources fail when written."""
        db_session.add(User(regexp="(unclosed"))

        with pytest.raises(StatementError) as exc:
            db_session.commit()

        assert isinstance(exc.value.orig, re.error)


class TestParanoidBoolean:
    """Test the ParanoidBoolean type."""

    def test_load(self):
        """Stored values load as booleans."""
        property_type = ParanoidBoolean()

        assert property_type.load(1) is True
        assert property_type.load(0) is False
        assert property_type.load(None) is None

    def test_dump(self):
        """Native values dump as booleans."""
        property_type = ParanoidBoolean()

        assert property_type.dump(True) is True
        assert property_type.dump(False) is False
        assert property_type.dump(None) is None

    def test_paranoid_column_defaults(self):
        """paranoid_column is NOT NULL and defaults to False."""
        column = Ticket.__table__.c.deleted

        assert isinstance(column.type, ParanoidBoolean)
        assert column.nullable is False
        assert column.default.arg is False

    def test_stored_flag(self, db_session):
        """The flag is stored and loaded as a boolean."""
        ticket = Ticket(subject="Printer jam")
        db_session.add(ticket)
        db_session.commit()
        db_session.expire_all()

        assert db_session.get(Ticket, ticket.id).deleted is False


class TestParanoidAttributeDetection:
    """Test is_paranoid_attribute."""

    def test_column(self):
        assert is_paranoid_attribute(Column(ParanoidBoolean)) is True
        assert is_paranoid_attribute(Column(String(10))) is False

    def test_mapped_column(self):
        assert is_paranoid_attribute(paranoid_column()) is True
        assert is_paranoid_attribute(mapped_column(Integer)) is False

    def test_instrumented_attribute(self):
        assert is_paranoid_attribute(Ticket.deleted) is True
        assert is_paranoid_attribute(Ticket.subject) is False

    def test_other_values(self):
        assert is_paranoid_attribute(None) is False
        assert is_paranoid_attribute("deleted") is False


class TestBooleanAttributeDetection:
    """Test is_boolean_attribute."""

    def test_boolean_columns(self):
        assert is_boolean_attribute(Column(Boolean)) is True
        assert is_boolean_attribute(Column(ParanoidBoolean)) is True
        assert is_boolean_attribute(Ticket.deleted) is True

    def test_other_columns(self):
        assert is_boolean_attribute(Column(String(10))) is False
        assert is_boolean_attribute(Column(Regexp)) is False
        assert is_boolean_attribute(Ticket.subject) is False

    def test_other_values(self):
        assert is_boolean_attribute(None) is False
        assert is_boolean_attribute(True) is False


class TestPropertyType:
    """Test the PropertyType interface."""

    def test_conversions_required(self):
        """Subclasses must implement both conversions."""

        class Bare(PropertyType):
            impl = String
            cache_ok = True

        with pytest.raises(NotImplementedError):
            Bare().load("x")
        with pytest.raises(NotImplementedError):
            Bare().dump("x")

    def test_processors_delegate(self):
        """Bind and result processing go through dump and load."""

        class Upper(PropertyType):
            impl = String
            cache_ok = True

            def load(self, value):
                return None if value is None else value.upper()

            def dump(self, value):
                return None if value is None else value.lower()

        property_type = Upper()

        assert property_type.process_bind_param("ABC", None) == "abc"
        assert property_type.process_result_value("abc", None) == "ABC"
        assert property_type.process_result_value(None, None) is None
