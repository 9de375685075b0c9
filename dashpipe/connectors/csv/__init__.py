"""CSV connector and parser."""

from dashpipe.connectors.csv.connector import CsvConnector, create_csv_connector
from dashpipe.connectors.csv.parser import parse_csv, parse_csv_line

__all__ = ["CsvConnector", "create_csv_connector", "parse_csv", "parse_csv_line"]
