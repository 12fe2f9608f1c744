"""Models package."""

from .gallery_photo import GalleryPhoto
from .gallery_album import GalleryAlbum
from .bucket_list_entry import BucketListEntry
from .bucket_list_media import BucketListMedia
from .travel_country import TravelCountry
from .watchlist_movie import WatchlistMovie
