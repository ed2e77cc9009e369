from datetime import datetime

import pytest

from movie_catalog import MovieCatalog, MovieRecord, format_catalog, TIMESTAMP_FORMAT


def _catalog(*titles):
    return MovieCatalog([MovieRecord('2024-01-01 10:00:00', t, 2000 + i, float(i)) for i, t in enumerate(titles)])


def test_add_appends_with_timestamp():
    cat = MovieCatalog()
    m = cat.add('Inception', '2010', '9.99')
    assert len(cat) == 1
    assert list(cat)[-1] is m
    assert (m.title, m.year, m.price) == ('Inception', 2010, 9.99)
    # timestamp must parse with the documented format
    datetime.strptime(m.timestamp, TIMESTAMP_FORMAT)


def test_add_coerces_bad_numbers_to_zero():
    cat = MovieCatalog()
    m = cat.add('  Mystery  ', 'nineteen', 'cheap')
    assert m.title == 'Mystery'
    assert m.year == 0
    assert m.price == 0.0


def test_add_keeps_insertion_order_and_duplicates():
    cat = MovieCatalog()
    cat.add('Alien', 1979, 5)
    cat.add('Alien', 1979, 5)
    cat.add('Heat', 1995, 7.5)
    assert [m.title for m in cat] == ['Alien', 'Alien', 'Heat']


@pytest.mark.parametrize('index', [0, -1, 4, '0', '-2', '99', 'abc', '', '1.5', None, True])
def test_delete_rejects_out_of_range(index):
    cat = _catalog('A', 'B', 'C')
    before = list(cat)
    assert cat.delete(index) is None
    assert list(cat) == before


@pytest.mark.parametrize('index', [1, 2, 3])
def test_delete_removes_only_that_record(index):
    cat = _catalog('A', 'B', 'C')
    before = list(cat)
    removed = cat.delete(index)
    assert removed == before[index - 1]
    assert list(cat) == before[:index - 1] + before[index:]


def test_delete_accepts_text_index_and_shifts_positions():
    cat = _catalog('A', 'B', 'C')
    assert cat.delete(' 1 ').title == 'A'
    assert [m.title for m in cat] == ['B', 'C']
    assert cat.delete(3) is None


def test_format_empty_catalog():
    assert format_catalog(MovieCatalog()) == 'No movies in database.'


def test_format_lists_every_record_with_index():
    cat = _catalog('Inception', 'Dune')
    out = format_catalog(cat)
    assert '1. Inception' in out
    assert '2. Dune' in out
    assert 'Price: $1.00' in out
    assert 'Last Updated: 2024-01-01 10:00:00' in out


def test_format_is_idempotent():
    cat = _catalog('Inception', 'Dune')
    before = list(cat)
    assert format_catalog(cat) == format_catalog(cat)
    assert list(cat) == before


def test_record_line_parsing():
    m = MovieRecord.from_line('2024-01-01 10:00:00|Heat|1995|7.5\n')
    assert m == MovieRecord('2024-01-01 10:00:00', 'Heat', 1995, 7.5)
    assert MovieRecord.from_line('only|three|fields') is None
    assert MovieRecord.from_line('a|b|c|d|e') is None
    bad = MovieRecord.from_line('ts|Heat|soon|free')
    assert (bad.year, bad.price) == (0, 0.0)


def test_record_from_dict_requires_all_fields():
    with pytest.raises(ValueError):
        MovieRecord.from_dict({'title': 'Heat', 'year': 1995})
    with pytest.raises(TypeError):
        MovieRecord.from_dict(['Heat'])
    m = MovieRecord.from_dict({'timestamp': 't', 'title': 'Heat', 'year': '1995', 'price': None})
    assert (m.year, m.price) == (1995, 0.0)


@pytest.mark.parametrize('year', ['99999999999999999999', '-99999999999999999999', '2147483648', 2 ** 40])
def test_add_out_of_range_year_becomes_zero(year):
    m = MovieCatalog().add('Typo', year, '5')
    assert m.year == 0


def test_add_keeps_years_at_the_range_edges():
    cat = MovieCatalog()
    assert cat.add('Far future', '2147483647', '1').year == 2147483647
    assert cat.add('Far past', '-2147483648', '1').year == -2147483648


@pytest.mark.parametrize('price', ['inf', '-inf', 'nan', '1e400', float('inf')])
def test_add_non_finite_price_becomes_zero(price):
    m = MovieCatalog().add('Heat', '1995', price)
    assert m.price == 0.0
