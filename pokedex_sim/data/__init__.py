"""Static reference tables: type chart, regions and example species."""
