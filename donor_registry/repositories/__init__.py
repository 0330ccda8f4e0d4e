from .donor_repository import DonorRecord, DonorRepository, DuplicateContactError, GroupCounts
from .in_memory_donor_repository import InMemoryDonorRepository
from .sqlalchemy_donor_repository import SqlAlchemyDonorRepository
