from django.apps import AppConfig


class StandingsCoreConfig(AppConfig):
    name = 'courtside.standings_core'
    verbose_name = 'Standings Core Logic'
