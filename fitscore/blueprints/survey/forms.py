from flask_wtf import FlaskForm
from wtforms import StringField, RadioField, IntegerField, SubmitField
from wtforms.validators import DataRequired, Email, InputRequired, Length, NumberRange, StopValidation

SCORE_CHOICES = [(1, "1 - Muito Baixo"), (2, "2 - Baixo"), (3, "3 - Médio"), (4, "4 - Alto"), (5, "5 - Muito Alto")]

# field name -> (question, hint)
QUESTIONS = {
    "performance_experience": ("Como você avalia sua experiência profissional na área?",
                               "Considere tempo de atuação, projetos realizados e conhecimento técnico"),
    "performance_deliveries": ("Qual é sua capacidade de entregar resultados dentro dos prazos?",
                               "Pense em sua consistência e qualidade nas entregas"),
    "performance_skills": ("Como você classifica suas habilidades técnicas para a função?",
                           "Avalie seu domínio das ferramentas e tecnologias necessárias"),
    "energy_availability": ("Qual é sua disponibilidade para dedicação ao trabalho?",
                            "Considere horários, flexibilidade e comprometimento"),
    "energy_deadlines": ("Como você lida com prazos apertados e múltiplas demandas?",
                         "Pense em sua capacidade de priorização e gestão de tempo"),
    "energy_pressure": ("Como você se comporta sob pressão e em situações desafiadoras?",
                        "Avalie sua resiliência e capacidade de manter a qualidade"),
    "culture_values": ("O quanto você se identifica com valores de transparência e ética?",
                       "Considere a importância desses valores em sua vida profissional"),
    "culture_collaboration": ("Como você avalia sua capacidade de trabalhar em equipe?",
                              "Pense em comunicação, cooperação e resolução de conflitos"),
    "culture_innovation": ("Qual é seu interesse em inovação e melhoria contínua?",
                           "Avalie sua disposição para aprender e implementar mudanças"),
}


def _likert(name):
    return RadioField(QUESTIONS[name][0], choices=SCORE_CHOICES, coerce=int,
                      description=QUESTIONS[name][1], validators=[InputRequired()])


class PersonalForm(FlaskForm):
    candidate_name = StringField("Nome completo", validators=[DataRequired(), Length(max=200)])
    candidate_email = StringField("E-mail", validators=[DataRequired(), Email(), Length(max=254)])
    submit = SubmitField("Próximo")


class PerformanceForm(FlaskForm):
    performance_experience = _likert("performance_experience")
    performance_deliveries = _likert("performance_deliveries")
    performance_skills = _likert("performance_skills")
    submit = SubmitField("Próximo")


class EnergyForm(FlaskForm):
    energy_availability = _likert("energy_availability")
    energy_deadlines = _likert("energy_deadlines")
    energy_pressure = _likert("energy_pressure")
    submit = SubmitField("Próximo")


class CultureForm(FlaskForm):
    culture_values = _likert("culture_values")
    culture_collaboration = _likert("culture_collaboration")
    culture_innovation = _likert("culture_innovation")
    submit = SubmitField("Ver resultado")


def _json_int(form, field):
    # IntegerField coerces with int(), so 4.9, true and "4" would all pass
    raw = field.raw_data[0] if field.raw_data else None
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise StopValidation("Must be an integer between 1 and 5.")


def _answer(label):
    return IntegerField(label, validators=[InputRequired(), _json_int, NumberRange(min=1, max=5)])


class EvaluationForm(FlaskForm):
    """Whole questionnaire in one form, used by the JSON API."""
    candidate_name = StringField("candidate_name", validators=[DataRequired(), Length(max=200)])
    candidate_email = StringField("candidate_email", validators=[DataRequired(), Email(), Length(max=254)])
    performance_experience = _answer("performance_experience")
    performance_deliveries = _answer("performance_deliveries")
    performance_skills = _answer("performance_skills")
    energy_availability = _answer("energy_availability")
    energy_deadlines = _answer("energy_deadlines")
    energy_pressure = _answer("energy_pressure")
    culture_values = _answer("culture_values")
    culture_collaboration = _answer("culture_collaboration")
    culture_innovation = _answer("culture_innovation")


# (title, description, form class, fields)
STEPS = [
    ("Dados Pessoais", "Informações básicas", PersonalForm, ("candidate_name", "candidate_email")),
    ("Performance", "Experiência e habilidades", PerformanceForm,
     ("performance_experience", "performance_deliveries", "performance_skills")),
    ("Energia", "Disponibilidade e pressão", EnergyForm,
     ("energy_availability", "energy_deadlines", "energy_pressure")),
    ("Cultura", "Valores da empresa", CultureForm,
     ("culture_values", "culture_collaboration", "culture_innovation")),
]
