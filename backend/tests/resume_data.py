RESUME = {
    "basics": {
        "name": "Jane Doe",
        "label": "Data Engineer",
        "email": "jane@example.com",
        "summary": "Builds reliable data pipelines.",
        "location": {"city": "Berlin", "countryCode": "DE", "region": "Berlin"},
        "profiles": [{"network": "GitHub", "username": "janedoe"}],
    },
    "work": [
        {
            "name": "TechCorp",
            "position": "Data Engineer",
            "startDate": "2019-01-01",
            "endDate": "2023-06-30",
            "highlights": ["Moved batch ETL to Spark"],
        }
    ],
    "skills": [
        {"name": "Python", "keywords": ["pandas", "Airflow"]},
        {"name": "SQL"},
        {"name": "Spark"},
        {"name": "Docker"},
    ],
    "projects": [{"name": "Pipeline kit", "keywords": ["dbt"]}],
}
