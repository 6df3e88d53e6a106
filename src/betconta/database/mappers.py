"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic. Status strings stored in the
database become enum members here, and datetimes read back without tzinfo
(SQLite drops it) are tagged as UTC.
"""

from betconta.domain import entities as domain
from betconta.database.models import (
    MasterUser as ORMMasterUser,
    ChildAccount as ORMChildAccount,
    PixKey as ORMPixKey,
    KycCase as ORMKycCase,
    Affiliate as ORMAffiliate,
    AffiliateSettings as ORMAffiliateSettings,
    CommissionRecord as ORMCommissionRecord,
)
from betconta.utils.clock import as_utc


def master_user_to_domain(orm_user: ORMMasterUser) -> domain.MasterUser:
    """Convert SQLAlchemy MasterUser model to domain MasterUser entity."""
    return domain.MasterUser(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        cpf=orm_user.cpf,
        is_active=orm_user.is_active,
        affiliate_status=(
            domain.AffiliateApproval(orm_user.affiliate_status)
            if orm_user.affiliate_status is not None
            else None
        ),
        created_at=as_utc(orm_user.created_at),
    )


def child_account_to_domain(orm_child: ORMChildAccount) -> domain.ChildAccount:
    """Convert SQLAlchemy ChildAccount model to domain ChildAccount entity."""
    return domain.ChildAccount(
        id=orm_child.id,
        master_user_id=orm_child.master_user_id,
        name=orm_child.name,
        cpf=orm_child.cpf,
        cpf_mask=orm_child.cpf_mask,
        rg_number=orm_child.rg_number,
        email=orm_child.email,
        whatsapp=orm_child.whatsapp,
        status=domain.ChildAccountStatus(orm_child.status),
        balance=orm_child.balance,
        created_at=as_utc(orm_child.created_at),
        updated_at=as_utc(orm_child.updated_at),
    )


def pix_key_to_domain(orm_key: ORMPixKey) -> domain.PixKeyRecord:
    """Convert SQLAlchemy PixKey model to domain PixKeyRecord entity."""
    return domain.PixKeyRecord(
        id=orm_key.id,
        child_account_id=orm_key.child_account_id,
        key_type=domain.PixKeyType(orm_key.key_type),
        value=orm_key.value,
        is_active=orm_key.is_active,
        created_at=as_utc(orm_key.created_at),
        closed_at=as_utc(orm_key.closed_at),
    )


def kyc_case_to_domain(orm_case: ORMKycCase) -> domain.KycCase:
    """Convert SQLAlchemy KycCase model to domain KycCase entity."""
    documents = domain.KycDocuments(
        front=orm_case.document_front,
        back=orm_case.document_back,
        selfie=orm_case.selfie,
        document_type=(
            domain.DocumentType(orm_case.document_type)
            if orm_case.document_type is not None
            else None
        ),
        document_number=orm_case.document_number,
        holder_name=orm_case.holder_name,
    )
    return domain.KycCase(
        id=orm_case.id,
        master_user_id=orm_case.master_user_id,
        child_account_id=orm_case.child_account_id,
        account_type=domain.KycAccountType(orm_case.account_type),
        documents=documents,
        status=domain.KycStatus(orm_case.status),
        submitted_at=as_utc(orm_case.submitted_at),
        reviewed_at=as_utc(orm_case.reviewed_at),
        approved_at=as_utc(orm_case.approved_at),
        reviewed_by=orm_case.reviewed_by,
        review_notes=orm_case.review_notes,
    )


def affiliate_to_domain(orm_affiliate: ORMAffiliate) -> domain.Affiliate:
    """Convert SQLAlchemy Affiliate model to domain Affiliate entity."""
    return domain.Affiliate(
        id=orm_affiliate.id,
        master_user_id=orm_affiliate.master_user_id,
        code=orm_affiliate.code,
        commission_rate=orm_affiliate.commission_rate,
        min_price=orm_affiliate.min_price,
        max_price=orm_affiliate.max_price,
        total_sales=orm_affiliate.total_sales,
        total_commission=orm_affiliate.total_commission,
        is_active=orm_affiliate.is_active,
        approval_status=domain.AffiliateApproval(orm_affiliate.approval_status),
        created_at=as_utc(orm_affiliate.created_at),
        updated_at=as_utc(orm_affiliate.updated_at),
    )


def affiliate_settings_to_domain(orm_settings: ORMAffiliateSettings) -> domain.AffiliateSettings:
    """Convert SQLAlchemy AffiliateSettings model to domain AffiliateSettings entity."""
    return domain.AffiliateSettings(
        affiliate_id=orm_settings.affiliate_id,
        default_price=orm_settings.default_price,
        custom_message=orm_settings.custom_message,
        landing_page_enabled=orm_settings.landing_page_enabled,
        updated_at=as_utc(orm_settings.updated_at),
    )


def commission_record_to_domain(orm_record: ORMCommissionRecord) -> domain.CommissionRecord:
    """Convert SQLAlchemy CommissionRecord model to domain CommissionRecord entity."""
    return domain.CommissionRecord(
        id=orm_record.id,
        affiliate_id=orm_record.affiliate_id,
        child_account_id=orm_record.child_account_id,
        sale_price=orm_record.sale_price,
        base_cost=orm_record.base_cost,
        commission=orm_record.commission,
        payment_status=domain.PaymentStatus(orm_record.payment_status),
        created_at=as_utc(orm_record.created_at),
        paid_at=as_utc(orm_record.paid_at),
    )
