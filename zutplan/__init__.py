"""zutplan: timetable views (day/week/month) for the ZUT plan service."""
