"""
Demo fixtures loaded into the store at start-up.

Booking dates are relative to the store's clock so the demo calendar
always shows bookings in the current month and the coming week.
"""

from datetime import date, datetime, timedelta, timezone

from ..schemas.booking import Booking, BookingStatus
from ..schemas.experience import Experience
from ..schemas.message import Conversation, Message
from ..schemas.partner import Partner, PartnerStatus
from ..schemas.user import User, UserRole
from .config import settings
from .store import DataStore


def _day_of_month(today: date, day: int) -> date:
    return today.replace(day=day)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def load_fixtures(store: DataStore) -> None:
    today = store.today()
    support_id = settings.support_partner_id

    store.users.extend(
        [
            User(id="u1", name="Karim Alaoui", email="karim@test.com", role=UserRole.CLIENT,
                 avatar_url="https://picsum.photos/id/1005/100/100"),
            User(id="u2", name="Sophie Martin", email="sophie@test.com", role=UserRole.PARTNER),
            User(id="u3", name="Youssef Admin", email="admin@tourisma.ma", role=UserRole.ADMIN),
            User(id="u4", name="Ahmed Guide", email="ahmed@desert.com", role=UserRole.PARTNER),
            User(id="u5", name="Mouna Surf", email="mouna@essaouira.com", role=UserRole.PARTNER),
        ]
    )

    store.partners.extend(
        [
            Partner(id=support_id, user_id="u3", company_name="Service Technique Tourisma",
                    description="Support officiel de la plateforme.", city="Marrakech",
                    phone="+212 524 000 000", status=PartnerStatus.ACTIVE,
                    join_date=date(2023, 1, 1), rating=5.0),
            Partner(id="p1", user_id="u2", company_name="Atlas Trekking & Co",
                    description="Spécialiste des randonnées dans le Haut Atlas depuis 10 ans.",
                    city="Marrakech", phone="+212 600 000 000", status=PartnerStatus.ACTIVE,
                    join_date=date(2023, 1, 15), rating=4.8),
            Partner(id="p2", user_id="u4", company_name="Agafay Luxury Camp",
                    description="Vivez la magie du désert de pierre avec un confort 5 étoiles.",
                    city="Agafay", phone="+212 611 111 111", status=PartnerStatus.ACTIVE,
                    join_date=date(2023, 3, 10), rating=4.9),
            Partner(id="p3", user_id="u5", company_name="Mogador Surf School",
                    description="École de surf et kitesurf sur la plage principale d'Essaouira.",
                    city="Essaouira", phone="+212 633 333 333", status=PartnerStatus.ACTIVE,
                    join_date=date(2023, 6, 20), rating=4.7),
            # Same owner as p3: one user may run several partner accounts.
            Partner(id="p4", user_id="u5", company_name="Fes Heritage Tours",
                    description="Guides officiels pour explorer la plus grande médina du monde.",
                    city="Fès", phone="+212 644 444 444", status=PartnerStatus.ACTIVE,
                    join_date=date(2023, 8, 15), rating=4.9),
        ]
    )

    store.experiences.extend(
        [
            Experience(
                id="e1", partner_id="p1", title="Randonnée vallée de l'Ourika et 7 cascades",
                category="Aventure",
                description="Une journée complète pour explorer la vallée de l'Ourika et grimper voir les 7 cascades.",
                price=450, duration="1 Jour", location="Marrakech",
                images=["https://picsum.photos/id/1036/800/600", "https://picsum.photos/id/1015/800/600"],
                max_guests=12, rating=4.7, reviews_count=124,
                included=["Transport A/R", "Guide local", "Déjeuner traditionnel"],
            ),
            Experience(
                id="e2", partner_id="p2", title="Dîner spectacle sous les étoiles à Agafay",
                category="Désert",
                description="Coucher de soleil suivi d'un dîner marocain sous une tente nomade de luxe.",
                price=800, duration="6 Heures", location="Agafay",
                images=["https://picsum.photos/id/1022/800/600", "https://picsum.photos/id/1021/800/600"],
                max_guests=30, rating=4.9, reviews_count=85,
                included=["Transport privé", "Dîner 3 plats", "Spectacle gnawa"],
            ),
            Experience(
                id="e3", partner_id="p1", title="Ascension du Mont Toubkal (2 Jours)",
                category="Sport",
                description="Le toit de l'Afrique du Nord vous attend.",
                price=1500, duration="2 Jours", location="Imlil",
                images=["https://picsum.photos/id/1018/800/600"],
                max_guests=6, rating=5.0, reviews_count=12,
                included=["Mule", "Guide montagne", "Hébergement refuge", "Repas"],
            ),
            Experience(
                id="e4", partner_id="p3", title="Cours de Surf initiation à Essaouira",
                category="Sport",
                description="Apprenez à surfer les vagues de l'Atlantique avec des instructeurs certifiés.",
                price=350, duration="2 Heures", location="Essaouira",
                images=["https://images.unsplash.com/photo-1502680390469-be75c86b636f"],
                max_guests=8, rating=4.8, reviews_count=42,
                included=["Planche", "Combinaison", "Moniteur", "Thé à la menthe"],
            ),
            Experience(
                id="e5", partner_id="p4", title="Exploration secrète de la Médina de Fès",
                category="Culture",
                description="Visite des tanneries, médersas et artisans de Fès el-Bali.",
                price=400, duration="4 Heures", location="Fès",
                images=["https://images.unsplash.com/photo-1539020140153-e479b8c22e70"],
                max_guests=10, rating=4.9, reviews_count=210,
                included=["Guide certifié", "Frais d'entrée Médersa", "Dégustation"],
            ),
            Experience(
                id="e6", partner_id="p1", title="La ville bleue : Excursion à Chefchaouen",
                category="Culture",
                description="Une journée de dépaysement dans les montagnes du Rif.",
                price=600, duration="1 Jour", location="Chefchaouen",
                images=["https://images.unsplash.com/photo-1512411984249-1667be926715"],
                max_guests=15, rating=4.6, reviews_count=89,
                included=["Transport", "Guide", "Déjeuner"],
            ),
        ]
    )

    store.bookings.extend(
        [
            Booking(id="b1", experience_id="e1", client_id="u1", date=_day_of_month(today, 5),
                    time="09:00", adults=2, guests=2, total_price=900,
                    status=BookingStatus.COMPLETED, created_at=date(2023, 11, 1)),
            Booking(id="b2", experience_id="e2", client_id="u1", date=_day_of_month(today, 12),
                    time="18:30", adults=2, guests=2, total_price=1600,
                    status=BookingStatus.CONFIRMED, created_at=date(2023, 12, 5)),
            Booking(id="b3", experience_id="e1", client_id="u1", date=today + timedelta(days=1),
                    time="10:00", adults=4, guests=4, total_price=1800,
                    status=BookingStatus.PENDING, created_at=date(2023, 12, 28)),
            Booking(id="b4", experience_id="e3", client_id="u1", date=today + timedelta(days=7),
                    time="07:00", adults=2, guests=2, total_price=3000,
                    status=BookingStatus.PENDING, created_at=date(2024, 1, 20)),
            Booking(id="b5", experience_id="e4", client_id="u1", date=_day_of_month(today, 20),
                    time="14:00", adults=1, guests=1, total_price=350,
                    status=BookingStatus.CONFIRMED, created_at=date(2024, 1, 22)),
        ]
    )

    store.conversations.extend(
        [
            Conversation(id="c1", client_id="u1", partner_id="p1",
                         last_message="Est-ce que le déjeuner est végétarien ?",
                         last_message_date=_ts("2023-12-28T14:30:00")),
            # A partner owner asking platform support.
            Conversation(id="c2", client_id="u2", partner_id=support_id,
                         last_message="Bonjour, comment modifier mes disponibilités ?",
                         last_message_date=_ts("2024-01-15T10:00:00")),
        ]
    )

    store.messages.extend(
        [
            Message(id="m1", sender_id="u1", receiver_id="u2",
                    content="Bonjour, pour la randonnée Ourika, est-ce que le déjeuner est végétarien ?",
                    timestamp=_ts("2023-12-28T14:30:00"), read=False,
                    client_id="u1", partner_id="p1"),
            Message(id="m2", sender_id="u2", receiver_id="u3",
                    content="Bonjour, comment modifier mes disponibilités ?",
                    timestamp=_ts("2024-01-15T10:00:00"), read=True,
                    client_id="u2", partner_id=support_id),
        ]
    )
