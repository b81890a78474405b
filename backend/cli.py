import click
import logging
from flask.cli import with_appcontext
from .models import db, User, Restroom
from shared.enums import RestroomStatus, UserRole

logger = logging.getLogger(__name__)

# Sample listings around the client's default map region (San Francisco)
SAMPLE_RESTROOMS = [
    {
        'name': 'Ferry Building Public Restroom',
        'address': '1 Ferry Building, San Francisco, CA',
        'latitude': 37.79554,
        'longitude': -122.39370,
        'description': 'Ground floor, north end of the marketplace.',
        'accessibility_features': ['Wheelchair Accessible', 'Baby Changing Station'],
        'operating_hours': '7:00 AM - 10:00 PM',
    },
    {
        'name': 'Union Square Pit Stop',
        'address': '333 Post St, San Francisco, CA',
        'latitude': 37.78798,
        'longitude': -122.40752,
        'accessibility_features': ['Wheelchair Accessible', 'Grab Bars'],
        'operating_hours': '8:00 AM - 8:00 PM',
    },
    {
        'name': 'Civic Center Plaza Restroom',
        'address': '355 McAllister St, San Francisco, CA',
        'latitude': 37.77956,
        'longitude': -122.41773,
        'accessibility_features': ['Wide Doorway'],
        'operating_hours': '24 hours',
    },
    {
        'name': 'Yerba Buena Gardens Restroom',
        'address': '750 Howard St, San Francisco, CA',
        'latitude': 37.78486,
        'longitude': -122.40230,
        'description': 'Next to the children\'s garden.',
        'accessibility_features': [],
        'operating_hours': '6:00 AM - 10:00 PM',
        'access_requirements': 'Ask at the information desk after 8 PM',
    },
    {
        'name': 'Dolores Park Restroom',
        'address': '19th St & Dolores St, San Francisco, CA',
        'latitude': 37.75962,
        'longitude': -122.42693,
        'accessibility_features': ['Wheelchair Accessible'],
        'operating_hours': '6:00 AM - 10:00 PM',
    },
]


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the database tables."""
    logger.info("Starting database initialization")
    db.create_all()
    logger.info("Database tables created successfully")
    click.echo('Initialized the database.')


@click.command('seed-restrooms')
@click.option('--status', type=click.Choice([s.value for s in RestroomStatus]), default=RestroomStatus.ACTIVE.value,
              help='Status given to the sample restrooms')
@with_appcontext
def seed_restrooms_command(status):
    """Insert sample restrooms around the default map region."""
    logger.info(f"Seeding sample restrooms (status={status})")
    added = 0
    for sample in SAMPLE_RESTROOMS:
        if Restroom.query.filter_by(name=sample['name']).first():
            logger.debug(f"Sample restroom already exists: {sample['name']}")
            continue
        db.session.add(Restroom(status=RestroomStatus(status), **sample))
        added += 1

    db.session.commit()
    logger.info(f"Seeded {added} sample restrooms")
    click.echo(f'Added {added} sample restrooms.')


@click.command('promote-moderator')
@click.argument('email')
@with_appcontext
def promote_moderator_command(email):
    """Grant the moderator role to the user with EMAIL."""
    user = User.query.filter_by(email=email.strip().lower()).first()
    if user is None:
        logger.warning(f"Cannot promote unknown user: {email}")
        raise click.ClickException(f'No user with email {email}')

    user.role = UserRole.MODERATOR
    db.session.commit()
    logger.info(f"Promoted user {user.id} to moderator")
    click.echo(f'{user.username} is now a moderator.')
