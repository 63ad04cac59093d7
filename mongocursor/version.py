"""MongoCursor Meta information."""

__title__ = "mongocursor"
__description__ = "Retrying and loggable wrappers \
    for MongoDB driver cursors."
__version__ = "1.0.0"
__copyright__ = "Copyright (c) 2020-2024 Jesus Lara"
__author__ = "Jesus Lara"
__author_email__ = "jesuslarag@gmail.com"
__license__ = "BSD"
