"""Reusable presentation widgets: restroom card, badge and loading spinner."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from shared.enums import RestroomStatus
from shared.utils import format_distance

BADGE_VARIANTS = {
    'success': ('#059669', '#FFFFFF'),
    'warning': ('#F59E0B', '#FFFFFF'),
    'error': ('#EF4444', '#FFFFFF'),
    'info': ('#2563EB', '#FFFFFF'),
    'neutral': ('#6B7280', '#FFFFFF'),
}

# (horizontal padding, vertical padding, font size)
BADGE_SIZES = {
    'small': (6, 2, 10),
    'medium': (8, 4, 12),
    'large': (12, 6, 14),
}


def badge_style(variant='neutral', size='medium'):
    """Pack style for a badge; unknown variants and sizes use the defaults."""
    background, color = BADGE_VARIANTS.get(variant, BADGE_VARIANTS['neutral'])
    pad_h, pad_v, font_size = BADGE_SIZES.get(size, BADGE_SIZES['medium'])
    return Pack(background_color=background, color=color, font_size=font_size,
                font_weight='bold', padding=(pad_v, pad_h))


def create_badge(text, variant='neutral', size='medium'):
    return toga.Label(text, style=badge_style(variant, size))


def create_loading_spinner(size=24, color='#2563EB'):
    return toga.ActivityIndicator(running=True, style=Pack(width=size, height=size, color=color, padding=10))


def card_fields(restroom):
    """Display strings for a restroom card.

    Optional lines are None when the restroom lacks that information.
    """
    is_open = restroom.get('status') == RestroomStatus.ACTIVE.value
    average = restroom.get('average_rating')
    return {
        'title': restroom.get('name') or '',
        'status_text': 'Open' if is_open else 'Closed',
        'status_variant': 'success' if is_open else 'error',
        'address': restroom.get('address') or '',
        'hours': restroom.get('operating_hours') or None,
        'accessible': 'Accessible' if restroom.get('accessibility_features') else None,
        'requirements': restroom.get('access_requirements') or None,
        'description': restroom.get('description') or None,
        'rating': f"★ {average:.1f} ({restroom.get('review_count', 0)})" if average is not None else 'No reviews yet',
        'distance': format_distance(restroom.get('distance')) or None,
    }


def create_restroom_card(restroom, on_press=None):
    """Card widget summarising one restroom."""
    fields = card_fields(restroom)

    header = toga.Box(
        children=[
            toga.Label(fields['title'], style=Pack(flex=1, font_size=16, font_weight='bold')),
            create_badge(fields['status_text'], fields['status_variant'], 'small'),
        ],
        style=Pack(direction=ROW, padding=(0, 0, 5, 0)),
    )

    card = toga.Box(style=Pack(direction=COLUMN, padding=12, background_color='#FFFFFF'))
    card.add(header)
    card.add(toga.Label(fields['address'], style=Pack(color='#6B7280')))
    if fields['hours']:
        card.add(toga.Label(f"Hours: {fields['hours']}", style=Pack(color='#6B7280')))
    if fields['accessible']:
        card.add(toga.Label(fields['accessible'], style=Pack(color='#059669')))
    if fields['requirements']:
        card.add(toga.Label(fields['requirements'], style=Pack(color='#F59E0B')))
    if fields['description']:
        card.add(toga.Label(fields['description'], style=Pack(color='#374151', padding=(5, 0, 0, 0))))

    footer = toga.Box(
        children=[toga.Label(fields['rating'], style=Pack(flex=1, color='#F59E0B'))],
        style=Pack(direction=ROW, padding=(5, 0, 0, 0)),
    )
    if fields['distance']:
        footer.add(toga.Label(fields['distance'], style=Pack(color='#2563EB')))
    card.add(footer)

    if on_press:
        card.add(toga.Button('Details', on_press=lambda w: on_press(restroom), style=Pack(padding=(5, 0, 0, 0))))
    return card
