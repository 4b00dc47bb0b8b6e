from .measures import (
    format_measures_csv,
    parse_input_type,
    parse_measures,
    parse_measures_checkstyle,
    parse_measures_csv,
)
