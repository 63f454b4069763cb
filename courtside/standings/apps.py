from django.apps import AppConfig


class StandingsConfig(AppConfig):
    name = 'courtside.standings'
    verbose_name = 'Pool Standings'
