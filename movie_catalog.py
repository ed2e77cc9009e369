# movie_catalog.py
# Personal movie catalog: records, file persistence and the interactive menu

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional, Iterable, Iterator, Tuple, Union
import argparse
import logging
import math
import os
import sys

import orjson

DATA_DIR = 'MovieData'
TEXT_FILENAME = 'movies.txt'
JSON_FILENAME = 'movies.json'
DELIMITER = '|'
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
RECORD_FIELDS = ('timestamp', 'title', 'year', 'price')
# signed 32-bit range
YEAR_MIN = -2 ** 31
YEAR_MAX = 2 ** 31 - 1

# Initialize logger at module level
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def current_timestamp() -> str:
    """Return the local time formatted for the 'Last Updated' field."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def _to_int(value: Any, default: int = 0) -> int:
    # unparsable or out-of-range input falls back to the default instead of raising
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        result = value
    else:
        try:
            result = int(str(value).strip())
        except (TypeError, ValueError):
            return default
    if not YEAR_MIN <= result <= YEAR_MAX:
        return default
    return result


def _to_float(value: Any, default: float = 0.0) -> float:
    # inf/nan have no JSON form, so they fall back too
    try:
        result = value if isinstance(value, float) else float(str(value).strip())
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


@dataclass
class MovieRecord:
    timestamp: str
    title: str
    year: int = 0
    price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'title': self.title,
            'year': self.year,
            'price': self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MovieRecord':
        """Build a record from a field-tagged mapping.

        Raises:
            TypeError: if ``data`` is not a mapping.
            ValueError: if any of the four fields is missing.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        missing = [k for k in RECORD_FIELDS if k not in data]
        if missing:
            raise ValueError(f"record is missing field(s): {', '.join(missing)}")
        return cls(
            timestamp=str(data['timestamp']),
            title=str(data['title']),
            year=_to_int(data['year']),
            price=_to_float(data['price']),
        )

    def to_line(self) -> str:
        # A title containing DELIMITER will not survive a reload; known limitation of this format.
        return DELIMITER.join([self.timestamp, self.title, str(self.year), str(self.price)])

    @classmethod
    def from_line(cls, line: str) -> Optional['MovieRecord']:
        """Parse one delimited line. Returns None unless it has exactly four fields."""
        parts = line.rstrip('\r\n').split(DELIMITER)
        if len(parts) != len(RECORD_FIELDS):
            return None
        timestamp, title, year, price = parts
        return cls(timestamp=timestamp, title=title, year=_to_int(year), price=_to_float(price))


# ---------- MovieCatalog: the session's ordered list of records ----------
class MovieCatalog:
    """Ordered, in-memory collection of movie records owned by one session.

    Records have no identity beyond their position; display indices are
    1-based and recomputed every time the catalog is shown.
    """

    def __init__(self, records: Optional[Iterable[MovieRecord]] = None):
        self.records: List[MovieRecord] = list(records) if records else []

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[MovieRecord]:
        return iter(self.records)

    def add(self, title: str, year: Any, price: Any) -> MovieRecord:
        """Append a new record stamped with the current time.

        ``year`` and ``price`` may be raw user text; anything that does not
        parse becomes 0 / 0.0.
        """
        movie = MovieRecord(
            timestamp=current_timestamp(),
            title=str(title).strip(),
            year=_to_int(year),
            price=_to_float(price),
        )
        self.records.append(movie)
        return movie

    def _position(self, display_index: Any) -> Optional[int]:
        # display_index is 1-based (user-facing); convert to 0-based
        if isinstance(display_index, bool):
            return None
        if isinstance(display_index, int):
            idx = display_index
        else:
            try:
                idx = int(str(display_index).strip())
            except ValueError:
                return None
        if 1 <= idx <= len(self.records):
            return idx - 1
        return None

    def delete(self, display_index: Any) -> Optional[MovieRecord]:
        """Remove and return the record at a 1-based index, or None if the index is invalid."""
        pos = self._position(display_index)
        if pos is None:
            return None
        return self.records.pop(pos)


def format_catalog(catalog: Iterable[MovieRecord]) -> str:
    """Render every record with its 1-based display index."""
    movies = list(catalog)
    if not movies:
        return "No movies in database."
    lines = ["=== Movie Database ==="]
    for i, m in enumerate(movies, start=1):
        lines.append(f"{i}. {m.title}")
        lines.append(f"   Year: {m.year}")
        lines.append(f"   Price: ${m.price:.2f}")
        lines.append(f"   Last Updated: {m.timestamp}")
        lines.append("---------------------")
    return "\n".join(lines)


def serialize_movies(movie_list: Iterable[MovieRecord]) -> List[Dict[str, Any]]:
    return [m.to_dict() for m in movie_list]


# ---------- Persistence helpers ----------
def detect_encoding(path: PathLike) -> str:
    """Return 'json' for a .json file and 'text' for anything else."""
    return 'json' if Path(path).suffix.lower() == '.json' else 'text'


def _decode_text(raw: bytes, path: PathLike) -> Tuple[List[MovieRecord], bool]:
    try:
        text = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        logger.warning("Could not decode %s as UTF-8 (%s). Starting with an empty catalog.", path, e)
        return [], False
    movies = []
    skipped = 0
    for line in text.split('\n'):
        if not line.strip():
            continue
        movie = MovieRecord.from_line(line)
        if movie is None:
            skipped += 1
            continue
        movies.append(movie)
    if skipped:
        logger.warning("Skipped %d malformed line(s) in %s.", skipped, path)
    return movies, not skipped


def _decode_json(raw: bytes, path: PathLike) -> Tuple[List[MovieRecord], bool]:
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        logger.warning("Could not parse %s as JSON (%s). Starting with an empty catalog.", path, e)
        return [], False
    if not isinstance(data, list):
        logger.warning("Unexpected format in %s: expected a list, got %s.", path, type(data).__name__)
        return [], False
    try:
        return [MovieRecord.from_dict(item) for item in data], True
    except (TypeError, ValueError) as e:
        logger.warning("Invalid movie entry in %s (%s). Starting with an empty catalog.", path, e)
        return [], False


def _read_catalog(p: Path, encoding: Optional[str] = None) -> Tuple[List[MovieRecord], bool]:
    """Read and decode an existing file. The flag is False when anything was dropped."""
    encoding = encoding or detect_encoding(p)
    try:
        raw = p.read_bytes()
    except OSError as e:
        logger.warning("Could not read %s: %s", p, e)
        return [], False
    if encoding == 'json':
        return _decode_json(raw, p)
    return _decode_text(raw, p)


def load_movies(path: PathLike, encoding: Optional[str] = None) -> List[MovieRecord]:
    """
    Load movie records from a catalog file.

    Args:
        path: File to read.
        encoding: 'json' or 'text'; detected from the file suffix when omitted.

    Returns:
        The records in file order. A missing file gives an empty list; an
        unreadable or malformed one gives an empty list and a logged warning.
    """
    p = Path(path)
    if not p.exists():
        logger.info("Movie file %s not found. Starting with an empty catalog.", path)
        return []
    movies, _ = _read_catalog(p, encoding)
    logger.info("Loaded %d movies from %s", len(movies), path)
    return movies


def _encode(movies: List[MovieRecord], encoding: str) -> bytes:
    if encoding == 'json':
        return orjson.dumps(serialize_movies(movies), option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE)
    return ''.join(m.to_line() + '\n' for m in movies).encode('utf-8')


def save_movies(path: PathLike, movie_list: Iterable[MovieRecord], encoding: Optional[str] = None) -> bool:
    """
    Write the whole catalog to ``path``, replacing whatever was there.

    The storage directory is created when missing. Data goes to a sibling
    temp file first and is moved over the target, so a failed write leaves
    the previous file untouched.

    Returns:
        bool: True if the save succeeded, False otherwise.
    """
    p = Path(path)
    movies = list(movie_list)
    encoding = encoding or detect_encoding(p)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Error creating directory %s: %s", p.parent, e)
        return False
    tmp = p.with_name(p.name + '.tmp')
    try:
        payload = _encode(movies, encoding)
        with tmp.open('wb') as f:
            f.write(payload)
        os.replace(str(tmp), str(p))
    except (OSError, TypeError) as e:
        logger.warning("Failed to save movies to %s: %s", path, e, exc_info=True)
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove temp file %s", tmp)
        return False
    logger.info("Saved %d movies to %s", len(movies), path)
    return True


def convert_catalog(src: PathLike, dst: PathLike) -> bool:
    """Copy a catalog from one encoding to another (chosen by each file's suffix).

    Refuses to write ``dst`` when ``src`` could not be decoded in full, so a
    damaged source never replaces a good catalog.
    """
    p = Path(src)
    if not p.exists():
        logger.warning("Cannot convert %s: file not found.", src)
        return False
    movies, clean = _read_catalog(p)
    if not clean:
        logger.warning("Cannot convert %s: it has unreadable records; %s left unchanged.", src, dst)
        return False
    return save_movies(dst, movies)


def open_catalog(path: PathLike) -> MovieCatalog:
    """Load the session catalog.

    When the JSON store does not exist yet but a legacy movies.txt sits next
    to it, the legacy records are loaded; the next save writes them as JSON.
    """
    p = Path(path)
    legacy = p.with_name(TEXT_FILENAME)
    if not p.exists() and detect_encoding(p) == 'json' and legacy.exists():
        logger.info("Found legacy catalog %s; it will be saved to %s on exit.", legacy, p)
        return MovieCatalog(load_movies(legacy))
    return MovieCatalog(load_movies(p))


# ---------- Interactive menu ----------
def input_movie(catalog: MovieCatalog) -> MovieRecord:
    """Prompt for title, year and price and append the new movie."""
    title = input("Enter movie title: ")
    year = input("Enter release year: ")
    price = input("Enter current price: $")
    movie = catalog.add(title, year, price)
    print(f"Added \"{movie.title}\" ({movie.year})")
    return movie


def display_all_movies(catalog: MovieCatalog) -> None:
    print()
    print(format_catalog(catalog))


def delete_movie(catalog: MovieCatalog) -> Optional[MovieRecord]:
    if not catalog:
        print("No movies to delete.")
        return None
    print("\n=== Delete a Movie ===")
    for i, m in enumerate(catalog, start=1):
        print(f"{i}. {m.title} ({m.year})")
    choice = input("Enter the number of the movie to delete: ")
    removed = catalog.delete(choice)
    if removed is None:
        print("Invalid selection.")
        return None
    print(f"Deleted \"{removed.title}\" ({removed.year})")
    return removed


def run_menu(catalog: MovieCatalog, path: PathLike) -> int:
    """Run the menu loop until Save & Exit. Returns the process exit code."""
    while True:
        print("\nMovie Database Menu:")
        print("1. Add new movie")
        print("2. View all movies")
        print("3. Delete a movie")
        print("4. Save & Exit")
        choice = input("Choice: ").strip()
        if choice == '1':
            input_movie(catalog)
        elif choice == '2':
            display_all_movies(catalog)
        elif choice == '3':
            delete_movie(catalog)
        elif choice == '4':
            if save_movies(path, catalog):
                print("Data saved. Goodbye!")
                return 0
            print(f"Error: failed to save movies to {path}.", file=sys.stderr)
            return 1
        else:
            print("Invalid choice. Please try again.")


def resolve_catalog_path(args: argparse.Namespace) -> Path:
    if args.file:
        return Path(args.file)
    filename = JSON_FILENAME if args.encoding == 'json' else TEXT_FILENAME
    return Path(args.data_dir) / filename


def _parse_args(argv=None):
    p = argparse.ArgumentParser(description="Movie Database Management System: keep a small catalog of movies")
    p.add_argument('--data-dir', type=str, default=DATA_DIR, help=f'Directory holding the catalog file (default: {DATA_DIR})')
    p.add_argument('--encoding', choices=['json', 'text'], default='json',
                   help=f"Storage encoding: 'json' uses {JSON_FILENAME}, 'text' uses {TEXT_FILENAME} (default: json)")
    p.add_argument('--file', type=str, default=None, help='Explicit catalog file; overrides --data-dir and --encoding')
    p.add_argument('--list', action='store_true', help='Print the catalog and exit')
    p.add_argument('--format', choices=['text', 'json'], default='text', help='Output format when using --list')
    p.add_argument('--convert', nargs=2, metavar=('SRC', 'DST'), default=None,
                   help='Convert a catalog file between encodings (by suffix) and exit')
    p.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return p.parse_args(argv)


def _run(args: argparse.Namespace) -> int:
    if args.convert:
        src, dst = args.convert
        if convert_catalog(src, dst):
            print(f"Converted {src} -> {dst}")
            return 0
        print(f"Error: could not convert {src} to {dst}.", file=sys.stderr)
        return 1

    path = resolve_catalog_path(args)
    if args.list:
        catalog = open_catalog(path)
        if args.format == 'json':
            print(orjson.dumps(serialize_movies(catalog), option=orjson.OPT_INDENT_2).decode('utf-8'))
        else:
            print(format_catalog(catalog))
        return 0

    print("=== Movie Database Management System ===")
    catalog = open_catalog(path)
    return run_menu(catalog, path)


def main(argv=None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        return _run(args)
    except KeyboardInterrupt:
        print("\nInterrupted. Exiting.", file=sys.stderr)
        return 130
    except EOFError:
        print("Error: input closed before Save & Exit.", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
